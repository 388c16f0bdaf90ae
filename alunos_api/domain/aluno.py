from __future__ import annotations

import re
from dataclasses import dataclass, fields
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Callable, Iterator


class Status(str, Enum):
    """Enrollment status. Members carry the wire value stored in the DB."""

    ACTIVE = "ATIVO"
    INACTIVE = "INATIVO"
    GRADUATED = "FORMADO"
    IN_PROGRESS = "GRADUANDO"


STATUS_VALUES = frozenset(s.value for s in Status)

_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

MSG_NOME = "Name cannot be null or made up only of spaces."
MSG_DATA_NASCIMENTO = "Birth date must be valid and earlier than the current date."
MSG_MATRICULA = "Enrollment code must have exactly 6 characters."
MSG_STATUS = "Status must be one of: ACTIVE, INACTIVE, GRADUATED, IN_PROGRESS."
MSG_EMAIL = "Email cannot be null and must be a valid email."


class AlunoValidationError(ValueError):
    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


def _parse_birth_date(value: Any) -> date | None:
    if not isinstance(value, str) or not _DATE_RE.fullmatch(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def validate_nome(nome: Any) -> bool:
    return isinstance(nome, str) and len(nome.strip()) > 0


def validate_data_nascimento(data_nascimento: Any, now: datetime | None = None) -> bool:
    """
    YYYY-MM-DD, a real calendar date, and earlier than now.

    The date is taken as midnight UTC, so today's date passes for the whole
    day except its very first instant.
    """
    d = _parse_birth_date(data_nascimento)
    if d is None:
        return False
    now = now or datetime.now(timezone.utc)
    return datetime(d.year, d.month, d.day, tzinfo=timezone.utc) < now


def validate_matricula(matricula: Any) -> bool:
    # raw length, no trimming
    return isinstance(matricula, str) and len(matricula) == 6


def validate_status(status: Any) -> bool:
    return isinstance(status, str) and status in STATUS_VALUES


def validate_email(email: Any) -> bool:
    return isinstance(email, str) and _EMAIL_RE.fullmatch(email) is not None


# Ordered: the first failing rule decides the response.
RULES: list[tuple[str, Callable[[Any], bool], str]] = [
    ("nome", validate_nome, MSG_NOME),
    ("data_nascimento", validate_data_nascimento, MSG_DATA_NASCIMENTO),
    ("matricula", validate_matricula, MSG_MATRICULA),
    ("status", validate_status, MSG_STATUS),
    ("email", validate_email, MSG_EMAIL),
]


@dataclass
class AlunoInput:
    """Request body as received: every field raw, missing ones as None."""

    nome: Any = None
    data_nascimento: Any = None
    matricula: Any = None
    status: Any = None
    email: Any = None

    @classmethod
    def from_mapping(cls, data: dict) -> "AlunoInput":
        return cls(**{f.name: data.get(f.name) for f in fields(cls)})


@dataclass(frozen=True)
class Aluno:
    nome: str
    data_nascimento: date
    matricula: str
    status: Status
    email: str

    def as_row(self) -> tuple:
        return (self.nome, self.data_nascimento.isoformat(), self.matricula, self.status.value, self.email)


def iter_failures(raw: AlunoInput) -> Iterator[AlunoValidationError]:
    for field, check, message in RULES:
        if not check(getattr(raw, field)):
            yield AlunoValidationError(field, message)


def parse_aluno(raw: AlunoInput) -> Aluno:
    """Run the rules in order and promote the input; raises on the first failure."""
    err = next(iter_failures(raw), None)
    if err is not None:
        raise err
    return Aluno(
        nome=raw.nome,
        data_nascimento=date.fromisoformat(raw.data_nascimento),
        matricula=raw.matricula,
        status=Status(raw.status),
        email=raw.email,
    )
