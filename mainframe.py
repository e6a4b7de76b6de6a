#!/usr/bin/env python3
"""
Atalho para abrir o painel de estoque direto na interface terminal.
"""

import sys

from painel_estoque.adapters.tui import main

if __name__ == "__main__":
    print("🚀 Iniciando Painel de Estoque - Terminal UI...")
    try:
        main()
    except KeyboardInterrupt:
        print("\n👋 Saindo...")
        sys.exit(0)
