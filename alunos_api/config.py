from __future__ import annotations

# alunos_api/config.py
import os
import yaml

_PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))

DEFAULTS = {
    "static_dir": os.path.join(_PROJECT_ROOT, "public"),
    "log_level": "INFO",
    "cors_origins": [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ],
    "port": 3000,
}


def read_config_yaml(path: str | None = None) -> dict:
    """读取项目根目录下的 config.yaml；文件缺失或格式错误时返回空 dict。"""
    cfg_path = path or os.path.join(_PROJECT_ROOT, "config.yaml")
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}
    return cfg if isinstance(cfg, dict) else {}


def _str_value(cfg: dict, key: str) -> str | None:
    v = cfg.get(key)
    if isinstance(v, str) and v.strip():
        return v.strip()
    return None


def get_config() -> dict:
    cfg = read_config_yaml()

    origins = cfg.get("cors_origins")
    if not (isinstance(origins, list) and all(isinstance(o, str) for o in origins)):
        origins = DEFAULTS["cors_origins"]

    try:
        port = int(os.environ.get("PORT") or cfg.get("port") or DEFAULTS["port"])
    except (TypeError, ValueError):
        port = DEFAULTS["port"]

    return {
        "db_path": _str_value(cfg, "db_path"),
        "test_db_path": _str_value(cfg, "test_db_path"),
        "static_dir": _str_value(cfg, "static_dir") or DEFAULTS["static_dir"],
        "log_level": (os.environ.get("ALUNOS_LOG_LEVEL") or _str_value(cfg, "log_level") or DEFAULTS["log_level"]).upper(),
        "cors_origins": origins,
        "port": port,
    }
