from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from pydantic import BaseModel

from ..domain.aluno import AlunoInput, AlunoValidationError
from ..logs import LogContext
from ..services.aluno_svc import AlunoService

router = APIRouter()

MSG_CREATED = "Student added successfully"
MSG_UPDATED = "Student updated successfully"
MSG_REMOVED = "Student removed successfully"
MSG_NOT_FOUND = "Student not found"


class AlunoBody(BaseModel):
    # 原样接收，校验交给 domain 层（缺失字段 -> None -> 400）
    nome: Any = None
    data_nascimento: Any = None
    matricula: Any = None
    status: Any = None
    email: Any = None


def get_aluno_service(request: Request) -> AlunoService:
    return request.app.state.aluno_svc


def _raw_fields(body: Any) -> dict:
    # 缺失、数组、纯文本等非 JSON 对象的请求体按空对象处理
    return AlunoBody.model_validate(body if isinstance(body, dict) else {}).model_dump()


@router.post("/alunos", status_code=201)
def api_aluno_create(body: Any = Body(None), svc: AlunoService = Depends(get_aluno_service)):
    log = LogContext("CREATE_ALUNO")
    fields = _raw_fields(body)
    log.set_payload(fields)
    try:
        new_id = svc.create(AlunoInput.from_mapping(fields), log)
    except AlunoValidationError as ve:
        log.write("INVALID", str(ve))
        raise HTTPException(status_code=400, detail=str(ve))
    except Exception as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=500, detail=str(e))
    log.write("OK")
    return {"id": new_id, "message": MSG_CREATED}


@router.get("/alunos")
def api_aluno_list(svc: AlunoService = Depends(get_aluno_service)):
    try:
        return svc.list_all()
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/alunos/{aluno_id}")
def api_aluno_get(aluno_id: str, svc: AlunoService = Depends(get_aluno_service)):
    try:
        row = svc.get(aluno_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
    if row is None:
        raise HTTPException(status_code=404, detail=MSG_NOT_FOUND)
    return row


@router.put("/alunos/{aluno_id}")
def api_aluno_update(aluno_id: str, body: Any = Body(None), svc: AlunoService = Depends(get_aluno_service)):
    log = LogContext("UPDATE_ALUNO")
    fields = _raw_fields(body)
    log.set_payload(fields)
    try:
        updated = svc.update(aluno_id, AlunoInput.from_mapping(fields), log)
    except AlunoValidationError as ve:
        log.write("INVALID", str(ve))
        raise HTTPException(status_code=400, detail=str(ve))
    except Exception as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=500, detail=str(e))
    if not updated:
        log.write("NOT_FOUND", MSG_NOT_FOUND)
        raise HTTPException(status_code=404, detail=MSG_NOT_FOUND)
    log.write("OK")
    return {"message": MSG_UPDATED}


@router.delete("/alunos/{aluno_id}")
def api_aluno_delete(aluno_id: str, svc: AlunoService = Depends(get_aluno_service)):
    log = LogContext("DELETE_ALUNO")
    try:
        removed = svc.delete(aluno_id, log)
    except Exception as e:
        log.write("ERROR", str(e))
        raise HTTPException(status_code=500, detail=str(e))
    if not removed:
        log.write("NOT_FOUND", MSG_NOT_FOUND)
        raise HTTPException(status_code=404, detail=MSG_NOT_FOUND)
    log.write("OK")
    return {"message": MSG_REMOVED}
