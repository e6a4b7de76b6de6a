from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen, Screen
from textual.widgets import Button, DataTable, Footer, Header, Input, Label, Select, Static, Tree

from painel_estoque.config import API_BASE_URL, ENABLE_LOGGING, ENABLE_OUTPUT, PREFS_DB_PATH
from painel_estoque.domain.models import EntityKind
from painel_estoque.domain.store import FormStore
from painel_estoque.infra.api import ApiClient
from painel_estoque.infra.logger import LOG_FILES, LOGS_DIR, get_log_summary, log_system_event
from painel_estoque.infra.repositories import SUBMENUS, PreferenciasRepo
from painel_estoque.usecases.adaptadores import adaptador_para
from painel_estoque.usecases.cadastro import CadastroForm
from painel_estoque.usecases.edicao import EditSession
from painel_estoque.usecases.formulario import FormularioBase, Opcao
from painel_estoque.usecases.listagem import ListController
from painel_estoque.usecases.preferencias import EstadoMenu


# (chave do submenu, rótulo, [(ação, rótulo)])
MENU = [
    ("cadastros", "📝 Cadastros", [
        ("cadastro:fornecedor", "Cadastrar Fornecedor"),
        ("lista:fornecedores", "Fornecedores Cadastrados"),
    ]),
    ("produtos", "📦 Produtos", [
        ("cadastro:produto", "Cadastrar Produto"),
        ("cadastro:entrada", "Cadastrar Entrada"),
        ("cadastro:retirada", "Cadastrar Retirada"),
        ("lista:produtos", "Produtos Cadastrados"),
        ("lista:entradas", "Entradas Cadastradas"),
        ("lista:retiradas", "Retiradas Cadastradas"),
    ]),
    ("movimentacoes", "🔄 Movimentações", [
        ("lista:movimentacoes", "Resumo por Produto"),
    ]),
    ("sistema", "⚙️ Sistema", [
        ("logs:api", "Logs da API"),
        ("logs:formularios", "Logs dos Formulários"),
        ("logs:listas", "Logs das Listas"),
        ("logs:system", "Logs do Sistema"),
        ("logs:resumo", "Resumo dos Logs"),
    ]),
]

TITULOS_CADASTRO = {
    EntityKind.FORNECEDOR: "Cadastrar Fornecedor",
    EntityKind.PRODUTO: "Cadastrar Produto",
    EntityKind.ENTRADA: "Cadastrar Entrada",
    EntityKind.RETIRADA: "Cadastrar Retirada",
}

TITULOS_LOG = {
    "api": "🌐 Logs da API",
    "formularios": "📝 Logs dos Formulários",
    "listas": "📋 Logs das Listas",
    "system": "⚙️ Logs do Sistema",
}

MARCADO = "☑"
DESMARCADO = "☐"


# -----------------------
# helpers de formulário
# -----------------------

def _texto(valor: Any) -> str:
    return "" if valor is None else str(valor)


def _nome_campo(widget_id: Optional[str]) -> Optional[str]:
    if not widget_id or not widget_id.startswith("campo-"):
        return None
    return widget_id[len("campo-"):]


def _opcao(opcoes: List[Opcao], valor: Any) -> Optional[Any]:
    """Valor da opção equivalente a ``valor`` (ids podem vir como int ou texto)."""
    if valor in (None, ""):
        return None
    for _rotulo, opcao in opcoes:
        if str(opcao) == str(valor):
            return opcao
    return None


def compor_campos(form: FormularioBase) -> ComposeResult:
    """Label + widget + linha de erro para cada campo do formulário."""
    draft = form.draft
    for campo in form.campos:
        yield Label(campo.rotulo)
        if campo.tipo == "select":
            yield Select(form.opcoes(campo), prompt=f"Selecione {campo.rotulo.lower()}", id=f"campo-{campo.nome}")
        else:
            yield Input(
                value=_texto(getattr(draft, campo.nome, "")),
                placeholder=campo.placeholder,
                id=f"campo-{campo.nome}",
            )
        yield Static("", id=f"erro-{campo.nome}", classes="erro-campo")


def _mostrar_erros(tela: Screen, form: FormularioBase, erros: Optional[Dict[str, str]] = None) -> None:
    erros = erros or {}
    for campo in form.campos:
        tela.query_one(f"#erro-{campo.nome}", Static).update(erros.get(campo.nome, ""))


def sincronizar_campos(
    tela: Screen,
    form: FormularioBase,
    erros: Optional[Dict[str, str]] = None,
    opcoes: bool = True,
) -> None:
    """Copia o rascunho atual (e os erros) para os widgets da tela.

    Com ``opcoes=False`` as listas dos selects só são refeitas quando é
    preciso limpar a escolha.
    """
    draft = form.draft
    for campo in form.campos:
        valor = getattr(draft, campo.nome, "")
        if campo.tipo == "select":
            select = tela.query_one(f"#campo-{campo.nome}", Select)
            lista = form.opcoes(campo)
            opcao = _opcao(lista, valor)
            if opcoes or (opcao is None and _opcao(lista, select.value) is not None):
                select.set_options(lista)
            if opcao is not None and select.value != opcao:
                select.value = opcao
        else:
            entrada = tela.query_one(f"#campo-{campo.nome}", Input)
            if entrada.value != _texto(valor):
                entrada.value = _texto(valor)
    _mostrar_erros(tela, form, erros)


def acompanhar_rascunho(tela: Screen, form: FormularioBase) -> Callable[[], None]:
    """Mantém os widgets iguais ao rascunho do Form Store; retorna o cancelamento."""

    def _ao_mudar(kind: EntityKind, _draft: Any) -> None:
        if kind == form.kind:
            sincronizar_campos(tela, form, getattr(form, "erros", None), opcoes=False)

    return form.store.subscribe(_ao_mudar)


def travar_envio(tela: Screen, travado: bool) -> None:
    """Salvar e cancelar ficam desabilitados enquanto o envio está em andamento."""
    for botao in tela.query("#salvar-btn, #cancelar-btn").results(Button):
        botao.disabled = travado


def _valor_do_select(form: FormularioBase, nome: str, valor: Any) -> Optional[Any]:
    """Valor escolhido no select, ou None se for o prompt (sem seleção)."""
    for campo in form.campos:
        if campo.nome == nome:
            return _opcao(form.opcoes(campo), valor)
    return None


# -----------------------
# telas
# -----------------------

class OutputScreen(Screen):
    """Tela de texto (logs, resumos)."""

    BINDINGS = [
        ("escape", "app.pop_screen", "Voltar"),
        ("q", "app.pop_screen", "Voltar"),
    ]

    def __init__(self, titulo: str, conteudo: str) -> None:
        super().__init__()
        self.titulo = titulo
        self.conteudo = conteudo

    def compose(self) -> ComposeResult:
        yield Header()
        with VerticalScroll():
            yield Static(f"📋 {self.titulo}", classes="output-title")
            yield Static(self.conteudo, markup=False)
        yield Footer()


class ConfirmarExclusaoModal(ModalScreen[bool]):
    """Confirmação da exclusão em lote."""

    BINDINGS = [("escape", "cancelar", "Cancelar")]

    def __init__(self, quantidade: int) -> None:
        super().__init__()
        self.quantidade = quantidade

    def compose(self) -> ComposeResult:
        with Container(id="confirmar-modal"):
            yield Static("🗑️ Confirmar exclusão", classes="modal-title")
            yield Label(f"Excluir {self.quantidade} item(ns) selecionado(s)?")
            with Horizontal():
                yield Button("Excluir", variant="error", id="confirmar-btn")
                yield Button("Cancelar", id="cancelar-btn")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "confirmar-btn")

    def action_cancelar(self) -> None:
        self.dismiss(False)


class EdicaoModal(ModalScreen[bool]):
    """Modal de edição montado a partir dos campos do tipo de entidade."""

    BINDINGS = [
        ("escape", "cancelar", "Cancelar"),
        ("ctrl+s", "salvar", "Salvar"),
    ]

    def __init__(self, sessao: EditSession) -> None:
        super().__init__()
        self.sessao = sessao
        self._cancelar_assinatura: Optional[Callable[[], None]] = None

    def compose(self) -> ComposeResult:
        with Container(id="edicao-modal"):
            yield Static(f"✏️ Editar {self.sessao.kind.value}", classes="modal-title")
            with VerticalScroll():
                yield from compor_campos(self.sessao)
            with Horizontal():
                yield Button("💾 Salvar", variant="primary", id="salvar-btn")
                yield Button("❌ Cancelar", id="cancelar-btn")

    async def on_mount(self) -> None:
        await self.sessao.open()
        sincronizar_campos(self, self.sessao)
        self._cancelar_assinatura = acompanhar_rascunho(self, self.sessao)

    def on_unmount(self) -> None:
        if self._cancelar_assinatura:
            self._cancelar_assinatura()

    def on_input_changed(self, event: Input.Changed) -> None:
        nome = _nome_campo(event.input.id)
        if nome is not None and _texto(getattr(self.sessao.draft, nome, "")) != event.value:
            self.sessao.set_field(nome, event.value)

    def on_select_changed(self, event: Select.Changed) -> None:
        nome = _nome_campo(event.select.id)
        valor = _valor_do_select(self.sessao, nome, event.value) if nome else None
        if valor is not None:
            self.sessao.set_field(nome, valor)

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "salvar-btn":
            await self.action_salvar()
        elif event.button.id == "cancelar-btn":
            self.action_cancelar()

    async def action_salvar(self) -> None:
        travar_envio(self, True)
        try:
            ok = await self.sessao.submit()
        finally:
            travar_envio(self, False)
        if ok:
            self.dismiss(True)

    def action_cancelar(self) -> None:
        if self.sessao.cancel():
            self.dismiss(False)


class CadastroScreen(Screen):
    """Tela de cadastro de um tipo de entidade."""

    BINDINGS = [
        ("escape", "voltar", "Voltar"),
        ("ctrl+s", "salvar", "Salvar"),
    ]

    def __init__(self, form: CadastroForm) -> None:
        super().__init__()
        self.form = form
        self.titulo = TITULOS_CADASTRO.get(form.kind, "Cadastro")
        self._cancelar_assinatura: Optional[Callable[[], None]] = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(f"📝 {self.titulo}", classes="output-title")
        with VerticalScroll(id="cadastro-campos"):
            yield from compor_campos(self.form)
        with Horizontal():
            yield Button("💾 Salvar", variant="primary", id="salvar-btn")
            yield Button("❌ Cancelar", id="cancelar-btn")
        yield Footer()

    async def on_mount(self) -> None:
        await self.form.open()
        self.sincronizar()
        self._cancelar_assinatura = acompanhar_rascunho(self, self.form)

    def on_unmount(self) -> None:
        if self._cancelar_assinatura:
            self._cancelar_assinatura()

    def sincronizar(self) -> None:
        sincronizar_campos(self, self.form, self.form.erros)

    async def on_input_changed(self, event: Input.Changed) -> None:
        nome = _nome_campo(event.input.id)
        if nome is None or _texto(getattr(self.form.draft, nome, "")) == event.value:
            return
        await self.form.set_field(nome, event.value)
        self.query_one(f"#erro-{nome}", Static).update(self.form.erros.get(nome, ""))

    async def on_select_changed(self, event: Select.Changed) -> None:
        nome = _nome_campo(event.select.id)
        valor = _valor_do_select(self.form, nome, event.value) if nome else None
        if valor is None or str(getattr(self.form.draft, nome, "")) == str(valor):
            return
        await self.form.set_field(nome, valor)
        # o fornecedor preenchido pela escolha do produto chega pela assinatura
        _mostrar_erros(self, self.form, self.form.erros)

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "salvar-btn":
            await self.action_salvar()
        elif event.button.id == "cancelar-btn":
            self.action_voltar()

    async def action_salvar(self) -> None:
        travar_envio(self, True)
        try:
            await self.form.submit()
        finally:
            travar_envio(self, False)
        _mostrar_erros(self, self.form, self.form.erros)

    def action_voltar(self) -> None:
        if self.form.cancel():
            self.app.pop_screen()


class ListaScreen(Screen):
    """Lista genérica: tabela, seleção, exclusão em lote e edição."""

    BINDINGS = [
        ("escape", "app.pop_screen", "Voltar"),
        ("space", "alternar", "Selecionar"),
        ("a", "selecionar_todos", "Todos"),
        ("e", "editar", "Editar"),
        ("x", "excluir", "Excluir"),
        ("r", "atualizar", "Atualizar"),
    ]

    def __init__(self, controller: ListController) -> None:
        super().__init__()
        self.controller = controller
        self._ids: Dict[str, Any] = {}

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(f"📋 {self.controller.adapter.titulo}", classes="output-title")
        yield Static("", id="lista-status")
        yield DataTable(id="lista-tabela", zebra_stripes=True, cursor_type="row")
        yield Footer()

    async def on_mount(self) -> None:
        await self.controller.load()
        self.renderizar()

    def renderizar(self) -> None:
        tabela = self.query_one("#lista-tabela", DataTable)
        cursor = tabela.cursor_row
        selecionavel = not self.controller.adapter.somente_leitura

        tabela.clear(columns=True)
        colunas = self.controller.columns()
        tabela.add_columns(*([" "] + colunas if selecionavel else colunas))

        self._ids = {}
        for linha in self.controller.rows():
            chave = str(linha.id)
            self._ids[chave] = linha.id
            celulas = [Text(c) for c in linha.celulas]
            if selecionavel:
                celulas.insert(0, Text(MARCADO if linha.selecionada else DESMARCADO))
            tabela.add_row(*celulas, key=chave)

        if tabela.row_count:
            tabela.move_cursor(row=min(max(cursor, 0), tabela.row_count - 1))

        self.query_one("#lista-status", Static).update(self.texto_status())

    def texto_status(self) -> str:
        total = len(self.controller.items)
        if self.controller.adapter.somente_leitura:
            return f"{total} registro(s)"
        return f"{len(self.controller.selected)} selecionado(s) de {total}"

    def _id_no_cursor(self) -> Optional[Any]:
        tabela = self.query_one("#lista-tabela", DataTable)
        if tabela.row_count == 0:
            return None
        row_key, _ = tabela.coordinate_to_cell_key(tabela.cursor_coordinate)
        return self._ids.get(row_key.value)

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        item_id = self._ids.get(event.row_key.value)
        if item_id is not None and not self.controller.excluindo:
            self.controller.toggle_select(item_id)
            self.renderizar()

    def action_alternar(self) -> None:
        item_id = self._id_no_cursor()
        if item_id is None or self.controller.excluindo:
            return
        self.controller.toggle_select(item_id)
        self.renderizar()

    def action_selecionar_todos(self) -> None:
        if self.controller.excluindo:
            return
        self.controller.toggle_select_all(not self.controller.all_selected)
        self.renderizar()

    async def action_atualizar(self) -> None:
        await self.controller.refresh()
        self.renderizar()

    def action_excluir(self) -> None:
        if self.controller.request_delete():
            self.app.push_screen(
                ConfirmarExclusaoModal(len(self.controller.selected)),
                self._ao_confirmar_exclusao,
            )

    def _ao_confirmar_exclusao(self, confirmado: Optional[bool]) -> None:
        if confirmado:
            self.run_worker(self._excluir(), exclusive=True)
        else:
            self.controller.cancel_delete()

    async def _excluir(self) -> None:
        quantidade = len(self.controller.selected)
        self.query_one("#lista-status", Static).update(f"Excluindo {quantidade} item(ns)...")
        await self.controller.confirm_delete()
        self.renderizar()

    def action_editar(self) -> None:
        if self.controller.request_edit() is None:
            return
        sessao = EditSession(
            self.controller.adapter.kind,
            self.controller.api,
            self.controller.store,
            notify=self.controller.notify,
        )
        self.app.push_screen(EdicaoModal(sessao), self._ao_fechar_edicao)

    def _ao_fechar_edicao(self, _salvo: Optional[bool]) -> None:
        self.run_worker(self._recarregar(), exclusive=True)

    async def _recarregar(self) -> None:
        await self.controller.close_edit()
        self.renderizar()


# -----------------------
# app
# -----------------------

class StatusDisplay(Static):
    """Resumo da configuração em uso."""

    def __init__(self, prefs_db: str = PREFS_DB_PATH, api_url: str = API_BASE_URL) -> None:
        super().__init__()
        self.prefs_db = prefs_db
        self.api_url = api_url
        self.refresh_status()

    def refresh_status(self) -> None:
        status_info = [f"🌐 API: {self.api_url}"]

        if Path(self.prefs_db).exists():
            status_info.append(f"✅ Preferências: {self.prefs_db}")
        else:
            status_info.append(f"❌ Preferências: {self.prefs_db} (ainda não criado)")

        status_info.append("✅ Logging: Ativo" if ENABLE_LOGGING else "❌ Logging: Desativado")
        status_info.append("✅ Output: Ativo" if ENABLE_OUTPUT else "❌ Output: Desativado")
        self.update("\n".join(status_info))


class MenuTreeWidget(Tree):
    """Menu lateral de navegação."""

    def __init__(self) -> None:
        super().__init__("📦 Painel de Estoque")
        self.grupos: Dict[str, Any] = {}
        self.setup_menu_tree()

    def setup_menu_tree(self) -> None:
        for chave, rotulo, itens in MENU:
            node = self.root.add(rotulo, data=chave)
            for acao, texto in itens:
                node.add_leaf(texto, data=acao)
            self.grupos[chave] = node

    def on_mount(self) -> None:
        self.root.expand()


class PainelEstoqueApp(App):
    """Painel de estoque no terminal."""

    CSS = """
    Screen {
        background: #001122;
    }

    .modal-title {
        background: #003366;
        color: #ffffff;
        text-align: center;
        padding: 1;
        margin-bottom: 1;
    }

    .output-title {
        background: #004488;
        color: #ffffff;
        text-align: center;
        padding: 1;
        margin-bottom: 1;
    }

    .erro-campo {
        color: #ff6666;
        height: auto;
    }

    Container#confirmar-modal {
        background: #112233;
        border: solid #ff5555;
        width: 60;
        height: 13;
        margin: 2;
    }

    Container#edicao-modal {
        background: #112233;
        border: solid #00aaff;
        width: 80;
        height: 90%;
        margin: 1;
    }

    #menu-panel {
        width: 38;
    }

    Tree {
        background: #001a33;
        color: #ccddff;
    }

    StatusDisplay {
        background: #003366;
        color: #ffffff;
        padding: 1;
    }

    Button {
        margin: 1;
    }
    """

    TITLE = "📦 Painel de Estoque"
    BINDINGS = [
        ("q", "quit", "Sair"),
        ("m", "alternar_menu", "Menu"),
        ("s", "refresh_status", "Status"),
    ]

    def __init__(self, api: Optional[ApiClient] = None, prefs_db: str = PREFS_DB_PATH) -> None:
        super().__init__()
        self.api_client = api or ApiClient()
        self.form_store = FormStore()
        self.prefs_db = prefs_db
        self.estado_menu = EstadoMenu(PreferenciasRepo(prefs_db))
        self.menu_tree: Optional[MenuTreeWidget] = None
        self.status_display: Optional[StatusDisplay] = None

    def compose(self) -> ComposeResult:
        yield Header()

        with Horizontal():
            with Container(id="menu-panel"):
                self.menu_tree = MenuTreeWidget()
                yield self.menu_tree

            with Vertical(classes="right-panel"):
                self.status_display = StatusDisplay(self.prefs_db, self.api_client.base_url)
                yield self.status_display

                yield Static("""
📦 PAINEL DE ESTOQUE

Como usar:
- Setas ↑↓ para navegar no menu, ENTER para abrir
- 'm' recolhe/expande o menu lateral
- Nas listas: ESPAÇO seleciona, 'a' todos, 'e' edita, 'x' exclui, 'r' atualiza
- 'q' para sair
                """, classes="info-panel")

        yield Footer()

    def on_mount(self) -> None:
        self.estado_menu.carregar()
        self.aplicar_menu()
        log_system_event("tui_start", {"api": self.api_client.base_url})

    async def on_unmount(self) -> None:
        await self.api_client.aclose()

    def aplicar_menu(self) -> None:
        """Reflete o estado salvo: painel visível e submenus abertos."""
        self.query_one("#menu-panel").display = not self.estado_menu.collapsed
        if self.menu_tree is None:
            return
        for nome, node in self.menu_tree.grupos.items():
            if nome not in SUBMENUS:
                continue
            if self.estado_menu.submenus.get(nome):
                node.expand()
            else:
                node.collapse()

    def on_tree_node_expanded(self, event: Tree.NodeExpanded) -> None:
        if event.node.data in SUBMENUS:
            self.estado_menu.definir_submenu(event.node.data, True)

    def on_tree_node_collapsed(self, event: Tree.NodeCollapsed) -> None:
        if event.node.data in SUBMENUS:
            self.estado_menu.definir_submenu(event.node.data, False)

    def on_tree_node_selected(self, event: Tree.NodeSelected) -> None:
        if not event.node.data:
            return
        self.execute_action(event.node.data)

    def execute_action(self, action: str) -> None:
        """Abre a tela correspondente a uma ação do menu (``tipo:alvo``)."""
        tipo, _, alvo = action.partition(":")
        if not alvo:
            return
        log_system_event("tui_action_start", {"action": action})

        try:
            if tipo == "lista":
                adapter = adaptador_para(alvo)
                if adapter is None:
                    raise ValueError(f"lista desconhecida: {alvo}")
                controller = ListController(adapter, self.api_client, self.form_store, notify=self.notify)
                self.push_screen(ListaScreen(controller))

            elif tipo == "cadastro":
                kind = EntityKind.parse(alvo)
                if kind not in TITULOS_CADASTRO:
                    raise ValueError(f"cadastro desconhecido: {alvo}")
                form = CadastroForm(kind, self.api_client, self.form_store, notify=self.notify)
                self.push_screen(CadastroScreen(form))

            elif tipo == "logs":
                if alvo == "resumo":
                    self.show_log_summary()
                else:
                    self.show_log_content(alvo)

        except ValueError as e:
            log_system_event("tui_action_error", {"action": action, "error": str(e)}, level="error")
            self.notify(f"❌ Erro: {str(e)}", severity="error")

    def action_alternar_menu(self) -> None:
        self.estado_menu.alternar_menu()
        self.aplicar_menu()

    def action_refresh_status(self) -> None:
        if self.status_display:
            self.status_display.refresh_status()
        self.notify("🔄 Status atualizado!", timeout=2)

    def show_log_content(self, log_type: str) -> None:
        log_system_event("view_logs", {"log_type": log_type})
        content = get_log_summary(log_type, lines=500)
        title = TITULOS_LOG.get(log_type, f"📋 Logs - {log_type}")
        self.push_screen(OutputScreen(title, content))

    def show_log_summary(self) -> None:
        log_system_event("view_log_summary")
        summary_text = "📊 RESUMO DOS LOGS\n\n"

        for nome, log_path in LOG_FILES.items():
            if log_path.exists():
                size_kb = log_path.stat().st_size / 1024
                try:
                    with open(log_path, "r", encoding="utf-8") as f:
                        lines = len(f.readlines())
                    summary_text += f"✅ {nome}: {lines} linhas ({size_kb:.1f} KB)\n"
                except OSError:
                    summary_text += f"⚠️ {nome}: {size_kb:.1f} KB (erro ao contar linhas)\n"
            else:
                summary_text += f"❌ {nome}: arquivo não encontrado\n"

        summary_text += f"\n📁 Diretório de logs: {LOGS_DIR}\n"
        self.push_screen(OutputScreen("Resumo dos Logs", summary_text))


def main() -> None:
    """Inicia o painel no terminal."""
    app = PainelEstoqueApp()
    app.run()


if __name__ == "__main__":
    main()
