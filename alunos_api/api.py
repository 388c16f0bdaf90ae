"""
FastAPI app entry point aggregating the routers under alunos_api/routes.
Keep as `uvicorn alunos_api.api:app`.
"""
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_config
from .db import get_db_path, open_storage
from .logs import setup_logging
from .routes import alunos as alunos_routes
from .routes import base as base_routes
from .services.aluno_svc import AlunoService

logger = logging.getLogger(__name__)


async def _http_error_handler(request: Request, exc: StarletteHTTPException):
    # 所有错误统一为 {"error": ...}
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=getattr(exc, "headers", None))


async def _request_error_handler(request: Request, exc: RequestValidationError):
    # 请求体不是合法 JSON 等
    msg = "; ".join(str(e.get("msg", "")) for e in exc.errors()) or "Invalid request"
    return JSONResponse({"error": msg}, status_code=400)


def create_app(db_path: str | None = None) -> FastAPI:
    cfg = get_config()
    setup_logging(cfg["log_level"])

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        path = db_path or get_db_path()
        conn = open_storage(path)
        app.state.aluno_svc = AlunoService(conn)
        logger.info("storage ready at %s", path)
        try:
            yield
        finally:
            conn.close()

    app = FastAPI(title=base_routes.APP_NAME, version=base_routes.APP_VERSION, lifespan=lifespan)
    app.state.static_dir = cfg["static_dir"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg["cors_origins"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(RequestValidationError, _request_error_handler)

    app.include_router(base_routes.router)
    app.include_router(alunos_routes.router)

    # front end assets; registered last so API routes win
    if os.path.isdir(cfg["static_dir"]):
        app.mount("/", StaticFiles(directory=cfg["static_dir"]), name="static")
    else:
        logger.warning("static dir %s not found, front end disabled", cfg["static_dir"])

    return app


app = create_app()


def main():
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=get_config()["port"])


if __name__ == "__main__":
    main()
