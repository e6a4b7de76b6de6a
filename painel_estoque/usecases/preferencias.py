# painel_estoque/usecases/preferencias.py
"""
UC: Estado do menu lateral persistido entre sessões.

- recolher o menu fecha todos os submenus;
- abrir um submenu com o menu recolhido expande o menu.
"""

from __future__ import annotations

import sqlite3
from typing import Dict

from painel_estoque.infra.logger import log_system_event
from painel_estoque.infra.migrations import apply_migrations
from painel_estoque.infra.repositories import MENU_COLLAPSED, SUBMENUS, PreferenciasRepo, chave_submenu


class EstadoMenu:
    """Menu recolhido e submenus abertos, gravados no banco de preferências.

    Falhas do SQLite nunca chegam à interface: o estado segue em memória e
    o erro vai para o log de sistema.
    """

    def __init__(self, repo: PreferenciasRepo) -> None:
        self.repo = repo
        self.collapsed = False
        self.submenus: Dict[str, bool] = {s: False for s in SUBMENUS}

    def carregar(self) -> None:
        try:
            apply_migrations(self.repo.db_path)
            self.collapsed = self.repo.menu_collapsed()
            self.submenus = {s: self.repo.submenu_aberto(s) for s in SUBMENUS}
        except (sqlite3.Error, OSError) as e:
            log_system_event("prefs_load_error", {"db": self.repo.db_path, "error": str(e)}, level="error")
            return
        if self.collapsed:
            self.submenus = {s: False for s in SUBMENUS}

    def alternar_menu(self) -> bool:
        """Recolhe/expande o menu. Retorna o novo estado ``collapsed``."""
        self.collapsed = not self.collapsed
        self.submenus = {s: False for s in SUBMENUS}
        self._salvar()
        return self.collapsed

    def definir_submenu(self, nome: str, aberto: bool) -> None:
        if nome not in self.submenus:
            return
        if self.submenus[nome] == aberto and not (aberto and self.collapsed):
            return
        self.submenus[nome] = aberto
        if aberto and self.collapsed:
            self.collapsed = False
        self._salvar()

    def alternar_submenu(self, nome: str) -> bool:
        self.definir_submenu(nome, not self.submenus.get(nome, False))
        return self.submenus.get(nome, False)

    def _salvar(self) -> None:
        itens = [(MENU_COLLAPSED, "1" if self.collapsed else "0")]
        itens += [(chave_submenu(s), "1" if aberto else "0") for s, aberto in self.submenus.items()]
        try:
            self.repo.set_many(itens)
        except (sqlite3.Error, OSError) as e:
            log_system_event("prefs_save_error", {"db": self.repo.db_path, "error": str(e)}, level="error")
