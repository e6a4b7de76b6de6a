# app.py
"""
Entrypoint da aplicação.

Uso:
  python app.py listar produtos
  python app.py movimentacoes
  python app.py cadastrar fornecedor -c nome=Acme -c email=contato@acme.com
  python app.py excluir produtos 3 7 --yes
  python app.py prefs show
  python app.py tui
"""

from painel_estoque.adapters.cli import main

if __name__ == "__main__":
    main()
