import sys
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


@pytest.fixture()
def tmp_db_path(tmp_path, monkeypatch):
    path = tmp_path / "alunos_test.db"
    # Point the app to this temp DB
    monkeypatch.setenv("ALUNOS_DB_PATH", str(path))
    return str(path)


@pytest.fixture()
def conn(tmp_db_path):
    from alunos_api.db import open_storage
    c = open_storage(tmp_db_path)
    try:
        yield c
    finally:
        c.close()


@pytest.fixture()
def svc(conn):
    from alunos_api.services.aluno_svc import AlunoService
    return AlunoService(conn)


@pytest.fixture()
def client(tmp_db_path):
    # lifespan opens the storage, so the client must be used as a context manager
    from alunos_api.api import create_app
    from fastapi.testclient import TestClient
    with TestClient(create_app(tmp_db_path)) as c:
        yield c


@pytest.fixture()
def ana():
    return {
        "nome": "Ana Silva",
        "data_nascimento": "2000-05-10",
        "matricula": "ABC123",
        "status": "ATIVO",
        "email": "ana@x.com",
    }
