from __future__ import annotations

# alunos_api/db.py
import sqlite3
from contextlib import contextmanager
from typing import Iterator
import os

from .config import get_config
from .repository import aluno_repo

# DB 路径解析顺序：
# 1) 环境变量 ALUNOS_DB_PATH（最高优先级）
# 2) config.yaml 的 test_db_path（当检测到测试环境时）
# 3) config.yaml 的 db_path（生产默认）
# 4) 兜底：项目根 database.db
_PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
_ROOT_DB = os.path.join(_PROJECT_ROOT, "database.db")


def get_db_path() -> str:
    env_path = os.environ.get("ALUNOS_DB_PATH")
    cfg = get_config()
    cfg_db = cfg.get("db_path")
    cfg_test = cfg.get("test_db_path")
    is_test = (os.environ.get("APP_ENV") == "test") or (os.environ.get("PYTEST_CURRENT_TEST") is not None)

    if env_path:
        path = env_path
    elif is_test and cfg_test:
        path = cfg_test
    elif cfg_db:
        path = cfg_db
    else:
        path = _ROOT_DB

    # 确保目录存在
    dirn = os.path.dirname(path) or "."
    os.makedirs(dirn, exist_ok=True)
    return path


def connect(db_path: str | None = None) -> sqlite3.Connection:
    """
    打开 SQLite 连接：autocommit（每条语句即一个隐式事务），row_factory 为 Row，
    允许 FastAPI 线程池中的不同线程共用同一连接。
    """
    path = db_path or get_db_path()
    conn = sqlite3.connect(
        path,
        check_same_thread=False,
        isolation_level=None,
    )
    conn.row_factory = sqlite3.Row
    return conn


def open_storage(db_path: str | None = None) -> sqlite3.Connection:
    """
    Open the process-wide storage handle and make sure the alunos table exists.

    Safe to call on every start: the schema is created only when missing and an
    existing table is never altered. Errors opening the file are not caught.
    """
    conn = connect(db_path)
    try:
        aluno_repo.ensure_schema(conn)
    except sqlite3.Error:
        conn.close()
        raise
    return conn


@contextmanager
def get_conn(db_path: str | None = None) -> Iterator[sqlite3.Connection]:
    """
    获取一个短生命周期的 SQLite 连接（脚本与测试使用）。优先使用显式传入的 db_path，否则走 get_db_path()。
    """
    conn = connect(db_path)
    try:
        yield conn
    finally:
        conn.close()
