"""
Load students from a CSV file into the alunos table.

Rows go through the same validation as POST /alunos; invalid or duplicate
rows are reported and skipped, the rest are inserted.

Usage:
  python -m alunos_api.scripts.seed_alunos --csv seeds/alunos.csv [--db database.db]
"""
from __future__ import annotations

import argparse
from alunos_api.db import open_storage
from alunos_api.logs import LogContext, setup_logging
from alunos_api.services.aluno_svc import AlunoService, seed_load


def main(argv: list[str] | None = None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--csv", required=True)
    ap.add_argument("--db", default=None, help="SQLite file; defaults to the configured path")
    args = ap.parse_args(argv)

    setup_logging()
    conn = open_storage(args.db)
    try:
        log = LogContext("SEED_ALUNOS")
        res = seed_load(AlunoService(conn), args.csv, log)
        log.write("OK" if not res["fail"] else "INVALID")
    finally:
        conn.close()
    print({"message": "ok", **res})
    return res


if __name__ == "__main__":
    main()
