# painel_estoque/infra/migrations.py
"""
Migrações do banco de preferências usando PRAGMA user_version.

V1: tabela chave/valor ``preferencias``
"""

from __future__ import annotations

from typing import List

from .db import connect
from .logger import log_system_event

SCHEMA_V1: List[str] = [
    """
    CREATE TABLE IF NOT EXISTS preferencias (
        chave TEXT PRIMARY KEY,
        valor TEXT
    );
    """,
]

VERSAO_ATUAL = 1


def _apply_v1(conn) -> None:
    for sql in SCHEMA_V1:
        conn.executescript(sql)


def schema_version(db_path: str) -> int:
    with connect(db_path) as conn:
        return conn.execute("PRAGMA user_version;").fetchone()[0] or 0


def apply_migrations(db_path: str) -> int:
    """Aplica migrações pendentes. Retorna a versão final do schema."""
    with connect(db_path) as conn:
        ver = conn.execute("PRAGMA user_version;").fetchone()[0] or 0
        inicial = ver

        if ver < 1:
            _apply_v1(conn)
            conn.execute("PRAGMA user_version = 1;")
            ver = 1

    if ver != inicial:
        log_system_event("migrations", {"db": db_path, "de": inicial, "para": ver})
    return ver
