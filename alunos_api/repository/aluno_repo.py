from __future__ import annotations

from sqlite3 import Connection
from typing import Any


def ensure_schema(conn: Connection):
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS alunos (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            nome TEXT NOT NULL,
            data_nascimento TEXT NOT NULL,
            matricula TEXT UNIQUE NOT NULL,
            status TEXT NOT NULL,
            email TEXT UNIQUE NOT NULL
        )
        """
    )


def insert(conn: Connection, row: tuple) -> int:
    # id 取自本语句的 RETURNING，连接共享，不读 lastrowid/rowcount
    rows = conn.execute(
        "INSERT INTO alunos(nome, data_nascimento, matricula, status, email) VALUES(?,?,?,?,?) RETURNING id",
        row,
    ).fetchall()
    return int(rows[0]["id"])


def list_all(conn: Connection):
    return conn.execute("SELECT * FROM alunos").fetchall()


def get_one(conn: Connection, aluno_id: Any):
    # aluno_id 原样传入：'12' 会按 INTEGER 亲和性匹配，'abc' 匹配不到任何行
    return conn.execute("SELECT * FROM alunos WHERE id=?", (aluno_id,)).fetchone()


def update(conn: Connection, aluno_id: Any, row: tuple) -> int:
    rows = conn.execute(
        "UPDATE alunos SET nome=?, data_nascimento=?, matricula=?, status=?, email=? WHERE id=? RETURNING id",
        (*row, aluno_id),
    ).fetchall()
    return len(rows)


def delete(conn: Connection, aluno_id: Any) -> int:
    rows = conn.execute("DELETE FROM alunos WHERE id=? RETURNING id", (aluno_id,)).fetchall()
    return len(rows)
