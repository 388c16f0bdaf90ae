import os

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import FileResponse

APP_NAME = "alunos-api"
APP_VERSION = "0.1.0"

router = APIRouter()

@router.get("/health")
def health():
    return {"status": "ok"}

@router.get("/version")
def version():
    return {"app": APP_NAME, "version": APP_VERSION}

@router.get("/", include_in_schema=False)
def index(request: Request):
    path = os.path.join(request.app.state.static_dir, "index.html")
    if not os.path.isfile(path):
        raise HTTPException(status_code=404, detail="index.html not found")
    return FileResponse(path)
