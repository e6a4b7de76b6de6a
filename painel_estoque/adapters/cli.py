# painel_estoque/adapters/cli.py
"""
CLI do painel de estoque (Typer).

Comandos principais:
- listar <recurso>              -> mostra uma coleção (fornecedores, produtos, entradas, retiradas)
- movimentacoes                 -> resumo de movimentações por produto
- cadastrar <tipo> -c k=v ...   -> cadastra fornecedor/produto/entrada/retirada
- editar <recurso> <id> -c k=v  -> altera campos de um registro
- excluir <recurso> <ids...>    -> exclusão em lote (com confirmação)
- prefs show/set                -> preferências da interface (menu)
- migrate                       -> cria/atualiza o banco de preferências
- logs [tipo]                   -> últimas linhas de um log
- tui                           -> interface terminal interativa
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, List, Optional, Tuple

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from painel_estoque.config import API_BASE_URL, PREFS_DB_PATH
from painel_estoque.domain.models import EntityKind, Recurso, field_names
from painel_estoque.domain.store import FormStore
from painel_estoque.infra.api import ApiClient
from painel_estoque.infra.logger import get_log_summary
from painel_estoque.infra.migrations import apply_migrations
from painel_estoque.infra.repositories import PreferenciasRepo, chaves_conhecidas
from painel_estoque.usecases.adaptadores import adaptador_para
from painel_estoque.usecases.cadastro import CadastroForm
from painel_estoque.usecases.edicao import EditSession
from painel_estoque.usecases.listagem import ListController


app = typer.Typer(help="Painel de Estoque (CLI)")
console = Console()

API_OPTION_HELP = "Endereço base da API"


# -----------------------
# util
# -----------------------

def _criar_api(api_url: str) -> ApiClient:
    return ApiClient(api_url)


def _notificar(message: str, severity: str = "information", **_: Any) -> None:
    estilo = {"warning": "yellow", "error": "bold red"}.get(severity, "green")
    console.print(f"[{estilo}]{message}[/]", highlight=False)


def _print_json(obj) -> None:
    typer.echo(json.dumps(obj, ensure_ascii=False, indent=2))


def _display_table(columns: List[str], rows: List[Tuple[str, ...]], title: str = "Resultado") -> None:
    """Exibe linhas já formatadas em uma tabela Rich."""
    if not rows:
        console.print(Panel("Nenhum dado encontrado", title=title, border_style="yellow"))
        return

    table = Table(title=title, box=box.ROUNDED)
    for column in columns:
        if column.lower().startswith(("qtde", "quantidade", "custo")):
            table.add_column(column, justify="right")
        elif column.lower().startswith("data"):
            table.add_column(column, justify="center")
        else:
            table.add_column(column)
    for row in rows:
        table.add_row(*row)
    console.print(table)


def _parse_campos(campos: Optional[List[str]]) -> List[Tuple[str, str]]:
    """``["nome=Ana", "email=a@b.c"]`` -> ``[("nome", "Ana"), ("email", "a@b.c")]``."""
    pares: List[Tuple[str, str]] = []
    for item in campos or []:
        nome, sep, valor = item.partition("=")
        if not sep or not nome.strip():
            typer.echo(f"Campo inválido: {item!r}. Use campo=valor.")
            raise typer.Exit(code=2)
        pares.append((nome.strip(), valor))
    return pares


def _checar_campos(kind: EntityKind, pares: List[Tuple[str, str]]) -> None:
    validos = field_names(kind)
    desconhecidos = [nome for nome, _ in pares if nome not in validos]
    if desconhecidos:
        typer.echo(f"Campos desconhecidos para {kind.value}: {', '.join(desconhecidos)}")
        typer.echo(f"Campos válidos: {', '.join(n for n in validos if n != 'id')}")
        raise typer.Exit(code=2)


def _adapter_ou_sair(recurso: str, editavel: bool = False):
    adapter = adaptador_para(recurso)
    if adapter is None:
        typer.echo(f"Recurso desconhecido: {recurso}")
        raise typer.Exit(code=2)
    if editavel and adapter.somente_leitura:
        typer.echo(f"{adapter.recurso.value} é somente leitura.")
        raise typer.Exit(code=2)
    return adapter


def _resolver_ids(controller: ListController, textos: List[str]) -> List[Any]:
    """Converte ids digitados nos ids carregados (a API pode devolver int)."""
    por_texto = {str(i): i for i in controller.ids() if i is not None}
    faltando = [t for t in textos if t not in por_texto]
    if faltando:
        typer.echo(f"Id(s) não encontrado(s) em {controller.recurso.value}: {', '.join(faltando)}")
        raise typer.Exit(code=1)
    return [por_texto[t] for t in textos]


def _mostrar_lista(controller: ListController, incluir_id: bool = True) -> None:
    colunas = controller.columns()
    linhas = [l.celulas for l in controller.rows()]
    if incluir_id and not controller.adapter.somente_leitura:
        colunas = ["Id"] + colunas
        linhas = [(str(l.id),) + l.celulas for l in controller.rows()]
    _display_table(colunas, linhas, title=controller.adapter.titulo)


# -----------------------
# listas
# -----------------------

async def _listar(recurso: str, api_url: str, como_json: bool) -> bool:
    adapter = _adapter_ou_sair(recurso)
    async with _criar_api(api_url) as api:
        controller = ListController(adapter, api, FormStore(), notify=_notificar)
        ok = await controller.load()
    if not ok:
        return False
    if como_json:
        _print_json(controller.items)
    else:
        _mostrar_lista(controller)
    return True


@app.command("listar")
def cmd_listar(
    recurso: str = typer.Argument(..., help="fornecedores | produtos | entradas | retiradas | movimentacoes"),
    como_json: bool = typer.Option(False, "--json", help="Imprime os registros crus em JSON"),
    api_url: str = typer.Option(API_BASE_URL, "--api", help=API_OPTION_HELP),
):
    """Lista uma coleção com as referências resolvidas."""
    if not asyncio.run(_listar(recurso, api_url, como_json)):
        raise typer.Exit(code=1)


@app.command("movimentacoes")
def cmd_movimentacoes(
    como_json: bool = typer.Option(False, "--json", help="Imprime os registros crus em JSON"),
    api_url: str = typer.Option(API_BASE_URL, "--api", help=API_OPTION_HELP),
):
    """Resumo de movimentações por produto (somente leitura)."""
    if not asyncio.run(_listar(Recurso.MOVIMENTACOES.value, api_url, como_json)):
        raise typer.Exit(code=1)


# -----------------------
# cadastro e edição
# -----------------------

async def _cadastrar(kind: EntityKind, pares: List[Tuple[str, str]], api_url: str) -> Tuple[CadastroForm, bool]:
    async with _criar_api(api_url) as api:
        form = CadastroForm(kind, api, FormStore(), notify=_notificar)
        form.store.reset_all()
        for nome, valor in pares:
            await form.set_field(nome, valor)
        ok = await form.submit()
    return form, ok


@app.command("cadastrar")
def cmd_cadastrar(
    tipo: str = typer.Argument(..., help="fornecedor | produto | entrada | retirada"),
    campos: Optional[List[str]] = typer.Option(None, "--campo", "-c", help="campo=valor (repetível)"),
    api_url: str = typer.Option(API_BASE_URL, "--api", help=API_OPTION_HELP),
):
    """Cadastra um registro a partir de pares campo=valor."""
    kind = EntityKind.parse(tipo)
    if kind is None or kind == EntityKind.USUARIO:
        typer.echo(f"Tipo desconhecido: {tipo}")
        raise typer.Exit(code=2)
    pares = _parse_campos(campos)
    _checar_campos(kind, pares)

    form, ok = asyncio.run(_cadastrar(kind, pares, api_url))
    for campo, msg in form.erros.items():
        typer.echo(f"  - {campo}: {msg}")
    if not ok:
        raise typer.Exit(code=1)


async def _editar(adapter, item_id: str, pares: List[Tuple[str, str]], api_url: str) -> bool:
    async with _criar_api(api_url) as api:
        store = FormStore()
        controller = ListController(adapter, api, store, notify=_notificar)
        if not await controller.load():
            return False
        (alvo,) = _resolver_ids(controller, [item_id])
        controller.toggle_select(alvo)
        if controller.request_edit() is None:
            return False

        sessao = EditSession(adapter.kind, api, store, notify=_notificar)
        for nome, valor in pares:
            sessao.set_field(nome, valor)
        ok = await sessao.submit()
        await controller.close_edit()
    return ok


@app.command("editar")
def cmd_editar(
    recurso: str = typer.Argument(..., help="fornecedores | produtos | entradas | retiradas"),
    item_id: str = typer.Argument(..., help="Id do registro"),
    campos: Optional[List[str]] = typer.Option(None, "--campo", "-c", help="campo=valor (repetível)"),
    api_url: str = typer.Option(API_BASE_URL, "--api", help=API_OPTION_HELP),
):
    """Altera campos de um registro existente (os demais são mantidos)."""
    adapter = _adapter_ou_sair(recurso, editavel=True)
    pares = _parse_campos(campos)
    if not pares:
        typer.echo("Nada a alterar. Informe pelo menos um campo.")
        raise typer.Exit(code=1)
    _checar_campos(adapter.kind, pares)
    if not asyncio.run(_editar(adapter, item_id, pares, api_url)):
        raise typer.Exit(code=1)


# -----------------------
# exclusão
# -----------------------

async def _excluir(adapter, ids: List[str], api_url: str, confirmar: bool) -> bool:
    async with _criar_api(api_url) as api:
        controller = ListController(adapter, api, FormStore(), notify=_notificar)
        if not await controller.load():
            return False
        for item_id in _resolver_ids(controller, ids):
            if item_id not in controller.selected:
                controller.toggle_select(item_id)
        if not controller.request_delete():
            return False
        if confirmar and not typer.confirm(f"Excluir {len(controller.selected)} item(ns)?"):
            controller.cancel_delete()
            typer.echo("Exclusão cancelada.")
            return True
        outcome = await controller.confirm_delete()
    for item_id, erro in outcome.falhas.items():
        typer.echo(f"  - {item_id}: {erro}")
    return outcome.ok


@app.command("excluir")
def cmd_excluir(
    recurso: str = typer.Argument(..., help="fornecedores | produtos | entradas | retiradas"),
    ids: List[str] = typer.Argument(..., help="Ids a excluir"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Não pedir confirmação"),
    api_url: str = typer.Option(API_BASE_URL, "--api", help=API_OPTION_HELP),
):
    """Exclui vários registros; cada id tem seu próprio resultado."""
    adapter = _adapter_ou_sair(recurso, editavel=True)
    if not asyncio.run(_excluir(adapter, ids, api_url, confirmar=not yes)):
        raise typer.Exit(code=1)


# -----------------------
# preferências e infra
# -----------------------

@app.command("migrate")
def cmd_migrate(db_path: str = typer.Option(PREFS_DB_PATH, "--db", help="Caminho do SQLite de preferências")):
    """Cria/atualiza o banco de preferências da interface."""
    versao = apply_migrations(db_path)
    typer.echo(f">> Preferências prontas em: {db_path} (schema v{versao})")


prefs_app = typer.Typer(help="Preferências da interface (menu recolhido e submenus abertos).")
app.add_typer(prefs_app, name="prefs")


@prefs_app.command("show")
def cmd_prefs_show(
    db_path: str = typer.Option(PREFS_DB_PATH, "--db", help="Caminho do SQLite de preferências"),
):
    """Exibe as preferências efetivas em JSON."""
    apply_migrations(db_path)
    repo = PreferenciasRepo(db_path)
    out: Dict[str, Any] = {chave: repo.get_bool(chave, False) for chave in chaves_conhecidas()}
    out["_db"] = db_path
    _print_json(out)


@prefs_app.command("set")
def cmd_prefs_set(
    chave: str = typer.Argument(..., help="menu_collapsed | submenu.cadastros | submenu.produtos | submenu.movimentacoes"),
    valor: bool = typer.Argument(..., help="true/false"),
    db_path: str = typer.Option(PREFS_DB_PATH, "--db", help="Caminho do SQLite de preferências"),
):
    """Define uma preferência booleana."""
    if chave not in chaves_conhecidas():
        typer.echo(f"Preferência desconhecida: {chave}")
        raise typer.Exit(code=1)
    apply_migrations(db_path)
    PreferenciasRepo(db_path).set_bool(chave, valor)
    typer.echo(">> Preferência atualizada.")


@app.command("logs")
def cmd_logs(
    tipo: str = typer.Argument("api", help="api | formularios | listas | system"),
    linhas: int = typer.Option(50, "--linhas", "-n", help="Quantidade de linhas"),
):
    """Mostra as últimas linhas de um arquivo de log."""
    typer.echo(get_log_summary(tipo, lines=linhas))


@app.command("tui")
def cmd_tui():
    """Inicia a interface terminal interativa."""
    from painel_estoque.adapters.tui import main as tui_main
    typer.echo("🚀 Iniciando Interface Terminal...")
    try:
        tui_main()
    except KeyboardInterrupt:
        typer.echo("\n👋 Saindo...")
        raise typer.Exit(0)


def main():
    app()


if __name__ == "__main__":
    main()
