import json, logging, sys, time, uuid
from typing import Optional

logger = logging.getLogger("alunos_api.ops")

_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"

# result -> log level
_LEVELS = {
    "OK": logging.INFO,
    "INVALID": logging.WARNING,
    "NOT_FOUND": logging.WARNING,
    "ERROR": logging.ERROR,
}


def setup_logging(level: str = "INFO"):
    """Attach one stdout handler to the alunos_api logger tree (idempotent)."""
    root = logging.getLogger("alunos_api")
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)


class LogContext:
    def __init__(self, action: str, user: str = "anonymous"):
        self.action = action
        self.user = user
        self.request_id = str(uuid.uuid4())
        self.start = time.perf_counter()
        self.payload = None
        self.entity_type = None
        self.entity_id = None

    def set_entity(self, etype: str, eid: str):
        self.entity_type = etype
        self.entity_id = eid

    def set_payload(self, obj): self.payload = obj

    def to_record(self, result: str = "OK", err: Optional[str] = None) -> dict:
        return {
            "action": self.action,
            "user": self.user,
            "request_id": self.request_id,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "payload": self.payload,
            "result": result,
            "err_msg": err,
            "latency_ms": int((time.perf_counter() - self.start) * 1000),
        }

    def write(self, result: str = "OK", err: Optional[str] = None):
        rec = self.to_record(result, err)
        logger.log(_LEVELS.get(result, logging.INFO), json.dumps(rec, ensure_ascii=False, default=str))
        return rec
