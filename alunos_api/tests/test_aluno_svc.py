from __future__ import annotations

import sqlite3
from concurrent.futures import ThreadPoolExecutor

import pytest

from alunos_api.domain.aluno import MSG_MATRICULA, AlunoInput, AlunoValidationError
from alunos_api.logs import LogContext


def test_create_get_roundtrip(svc, ana):
    log = LogContext("CREATE_ALUNO")
    new_id = svc.create(AlunoInput.from_mapping(ana), log)
    assert isinstance(new_id, int)
    assert log.entity_id == str(new_id)
    assert svc.get(new_id) == {"id": new_id, **ana}


def test_create_invalid_writes_nothing(svc, ana):
    with pytest.raises(AlunoValidationError, match=MSG_MATRICULA):
        svc.create(AlunoInput.from_mapping({**ana, "matricula": "AB12"}))
    assert svc.list_all() == []


def test_duplicate_is_a_storage_fault(svc, ana):
    first = svc.create(AlunoInput.from_mapping(ana))
    with pytest.raises(sqlite3.IntegrityError):
        svc.create(AlunoInput.from_mapping({**ana, "email": "outra@x.com"}))
    assert svc.get(first) == {"id": first, **ana}


def test_update_missing_returns_false(svc, ana):
    assert svc.update("42", AlunoInput.from_mapping(ana)) is False
    assert svc.list_all() == []


def test_update_validates_before_touching_storage(svc, ana):
    new_id = svc.create(AlunoInput.from_mapping(ana))
    with pytest.raises(AlunoValidationError):
        svc.update(str(new_id), AlunoInput.from_mapping({**ana, "status": "ACTIVE"}))
    assert svc.get(new_id)["status"] == "ATIVO"


def test_delete_twice(svc, ana):
    new_id = svc.create(AlunoInput.from_mapping(ana))
    assert svc.delete(str(new_id)) is True
    assert svc.delete(str(new_id)) is False
    assert svc.get(new_id) is None


def test_concurrent_creates_get_their_own_id(svc):
    # FastAPI 线程池共用同一连接
    per_thread, workers = 60, 8

    def _create(t):
        out = []
        for i in range(per_thread):
            mat = f"{t:02d}{i:04d}"
            new_id = svc.create(AlunoInput.from_mapping({
                "nome": f"Aluno {mat}",
                "data_nascimento": "2000-05-10",
                "matricula": mat,
                "status": "ATIVO",
                "email": f"{mat}@x.com",
            }))
            out.append((new_id, mat))
        return out

    with ThreadPoolExecutor(max_workers=workers) as ex:
        results = [pair for chunk in ex.map(_create, range(workers)) for pair in chunk]

    assert len({new_id for new_id, _ in results}) == per_thread * workers
    mismatched = [(new_id, mat) for new_id, mat in results if svc.get(new_id)["matricula"] != mat]
    assert mismatched == []


def test_concurrent_update_and_delete_report_own_rows(svc, ana):
    ids = [
        svc.create(AlunoInput.from_mapping({**ana, "matricula": f"MAT{i:03d}", "email": f"m{i}@x.com"}))
        for i in range(40)
    ]

    # 命中与未命中交错执行，各自只看本语句影响的行
    def _op(i):
        if i % 2:
            return svc.delete(str(9000 + i))
        return svc.update(str(ids[i]), AlunoInput.from_mapping(
            {**ana, "status": "FORMADO", "matricula": f"MAT{i:03d}", "email": f"m{i}@x.com"}))

    with ThreadPoolExecutor(max_workers=8) as ex:
        outcomes = list(ex.map(_op, range(len(ids))))
    assert outcomes == [i % 2 == 0 for i in range(len(ids))]

    with ThreadPoolExecutor(max_workers=8) as ex:
        removed = list(ex.map(lambda x: svc.delete(str(x)), ids))
    assert removed == [True] * len(ids)
    assert svc.list_all() == []
