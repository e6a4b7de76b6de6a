# painel_estoque/infra/db.py
"""
Conexão SQLite do banco local de preferências.
"""

from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator


@contextmanager
def connect(db_path: str) -> Iterator[sqlite3.Connection]:
    """
    Abre o banco de preferências:
    - cria o diretório pai se preciso
    - row_factory = sqlite3.Row
    - commit ao sair (rollback em caso de exceção)
    """
    pasta = os.path.dirname(os.path.abspath(db_path))
    os.makedirs(pasta, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        conn.row_factory = sqlite3.Row
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
