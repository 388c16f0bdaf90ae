"""
Student record service: validation plus the five CRUD operations.

The service holds the storage handle it was built with; it never opens
connections on its own. Storage faults (sqlite3.Error, UNIQUE violations
included) are not caught here, callers map them to a server error.
"""
from __future__ import annotations

import sqlite3
from sqlite3 import Connection
from typing import Any, Optional

import pandas as pd

from ..domain.aluno import AlunoInput, iter_failures, parse_aluno
from ..logs import LogContext
from ..repository import aluno_repo


class AlunoService:

    def __init__(self, conn: Connection):
        self.conn = conn

    def create(self, raw: AlunoInput, log: Optional[LogContext] = None) -> int:
        aluno = parse_aluno(raw)
        new_id = aluno_repo.insert(self.conn, aluno.as_row())
        if log is not None:
            log.set_entity("ALUNO", str(new_id))
        return new_id

    def list_all(self) -> list[dict[str, Any]]:
        return [dict(r) for r in aluno_repo.list_all(self.conn)]

    def get(self, aluno_id: Any) -> Optional[dict[str, Any]]:
        row = aluno_repo.get_one(self.conn, aluno_id)
        return dict(row) if row else None

    def update(self, aluno_id: Any, raw: AlunoInput, log: Optional[LogContext] = None) -> bool:
        """
        Overwrite all five fields of the row. Returns False when no row matched.

        There is no existence check before the write; the affected row count
        is the only not-found signal.
        """
        aluno = parse_aluno(raw)
        if log is not None:
            log.set_entity("ALUNO", str(aluno_id))
        return aluno_repo.update(self.conn, aluno_id, aluno.as_row()) > 0

    def delete(self, aluno_id: Any, log: Optional[LogContext] = None) -> bool:
        if log is not None:
            log.set_entity("ALUNO", str(aluno_id))
        return aluno_repo.delete(self.conn, aluno_id) > 0


def seed_load(svc: AlunoService, alunos_csv: str, log: LogContext) -> dict:
    """从 CSV 批量导入学生；表头：nome, data_nascimento, matricula, status, email。
       逐行走 create（同样的校验规则），失败的行记录到 errors，不中断导入。
    """
    df = pd.read_csv(alunos_csv, dtype=str, keep_default_na=False)

    ok, fail, errs = 0, 0, []
    for i, r in enumerate(df.to_dict(orient="records"), start=1):
        raw = AlunoInput.from_mapping(r)
        problems = [e.message for e in iter_failures(raw)]
        if problems:
            fail += 1
            errs.append({"index": i, "matricula": raw.matricula, "error": "; ".join(problems)})
            continue
        try:
            svc.create(raw)
            ok += 1
        except sqlite3.Error as e:
            fail += 1
            errs.append({"index": i, "matricula": raw.matricula, "error": str(e)})

    log.set_entity("ALUNO_CSV", alunos_csv)
    log.set_payload({"ok": ok, "fail": fail})
    return {"ok": ok, "fail": fail, "errors": errs}
