# painel_estoque/infra/repositories.py
"""
Repositório de preferências da interface (SQLite chave/valor).

Chaves conhecidas:
- menu_collapsed          -> menu lateral recolhido
- submenu.cadastros       -> submenu "Cadastros" aberto
- submenu.produtos        -> submenu "Produtos" aberto
- submenu.movimentacoes   -> submenu "Movimentações" aberto
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

from .db import connect

MENU_COLLAPSED = "menu_collapsed"
SUBMENUS = ("cadastros", "produtos", "movimentacoes")

_VERDADEIROS = {"1", "true", "sim", "s", "yes", "y", "on"}

def chave_submenu(nome: str) -> str:
    return f"submenu.{nome}"

def chaves_conhecidas() -> Tuple[str, ...]:
    return (MENU_COLLAPSED,) + tuple(chave_submenu(s) for s in SUBMENUS)

class PreferenciasRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def set(self, key: str, value: str) -> None:
        self.set_many([(key, value)])

    def set_many(self, items: Iterable[Tuple[str, str]]) -> None:
        with connect(self.db_path) as c:
            c.executemany(
                """
                INSERT INTO preferencias (chave, valor)
                VALUES (?, ?)
                ON CONFLICT(chave) DO UPDATE SET valor=excluded.valor
                """,
                list(items),
            )

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        with connect(self.db_path) as c:
            row = c.execute("SELECT valor FROM preferencias WHERE chave = ?", (key,)).fetchone()
            return row[0] if row else default

    def get_bool(self, key: str, default: bool = False) -> bool:
        v = self.get(key, None)
        if v is None:
            return default
        return v.strip().lower() in _VERDADEIROS

    def set_bool(self, key: str, value: bool) -> None:
        self.set(key, "1" if value else "0")

    # atalhos do menu

    def menu_collapsed(self) -> bool:
        return self.get_bool(MENU_COLLAPSED, False)

    def submenu_aberto(self, nome: str) -> bool:
        return self.get_bool(chave_submenu(nome), False)

