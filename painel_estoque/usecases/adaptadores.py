# painel_estoque/usecases/adaptadores.py
"""
Adaptadores declarativos das listas.

Cada tela de listagem difere apenas no recurso da API, nas colunas
exibidas e nas referências que precisam ser resolvidas (ex.: id do
fornecedor -> nome). Tudo isso fica descrito aqui; o comportamento
(carga, seleção, exclusão, edição) é único, em ``listagem.py``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from painel_estoque.domain.formatters import formatar_data, formatar_moeda
from painel_estoque.domain.models import EntityKind, Recurso
from painel_estoque.domain.policies import resolver_nome

# Coleções auxiliares já indexadas por id (texto).
Referencias = Dict[Recurso, Dict[str, Mapping[str, Any]]]
Renderizador = Callable[[Mapping[str, Any], Referencias], str]


@dataclass(frozen=True)
class Coluna:
    titulo: str
    render: Renderizador


@dataclass(frozen=True)
class EntityAdapter:
    """Configuração de uma lista: recurso, colunas e referências."""
    recurso: Recurso
    titulo: str
    colunas: Tuple[Coluna, ...]
    kind: Optional[EntityKind] = None
    referencias: Tuple[Recurso, ...] = ()
    id_field: Optional[str] = "id"

    @property
    def somente_leitura(self) -> bool:
        return self.kind is None

    def item_id(self, item: Mapping[str, Any]) -> Any:
        if self.id_field is None:
            return None
        return item.get(self.id_field)


# -----------------------
# colunas
# -----------------------

def _texto(val: Any) -> str:
    return "" if val is None else str(val)


def campo(titulo: str, nome: str) -> Coluna:
    return Coluna(titulo, lambda item, refs: _texto(item.get(nome)))


def data(titulo: str, nome: str) -> Coluna:
    return Coluna(titulo, lambda item, refs: formatar_data(item.get(nome)))


def moeda(titulo: str, nome: str) -> Coluna:
    return Coluna(titulo, lambda item, refs: formatar_moeda(item.get(nome)))


def referencia(titulo: str, nome: str, recurso: Recurso, campo_nome: str = "nome") -> Coluna:
    """Coluna que mostra o nome do registro referenciado ou "Desconhecido"."""
    return Coluna(
        titulo,
        lambda item, refs: resolver_nome(item.get(nome), refs.get(recurso, {}), campo_nome),
    )


# -----------------------
# adaptadores
# -----------------------

FORNECEDORES = EntityAdapter(
    recurso=Recurso.FORNECEDORES,
    titulo="Fornecedores Cadastrados",
    kind=EntityKind.FORNECEDOR,
    colunas=(
        campo("Nome", "nome"),
        campo("CNPJ", "cnpj"),
        campo("E-mail", "email"),
        campo("Telefone", "telefone"),
        campo("Celular", "celular"),
        campo("CEP", "cep"),
        campo("Cidade", "cidade"),
        campo("Estado", "estado"),
    ),
)

PRODUTOS = EntityAdapter(
    recurso=Recurso.PRODUTOS,
    titulo="Produtos Cadastrados",
    kind=EntityKind.PRODUTO,
    referencias=(Recurso.FORNECEDORES,),
    colunas=(
        campo("Nome", "nome"),
        campo("Categoria", "categoria"),
        referencia("Fornecedor", "fornecedor_id", Recurso.FORNECEDORES),
        campo("Marca", "marca"),
        campo("Foto", "picture"),
    ),
)

ENTRADAS = EntityAdapter(
    recurso=Recurso.ENTRADAS,
    titulo="Entradas Cadastradas",
    kind=EntityKind.ENTRADA,
    referencias=(Recurso.PRODUTOS, Recurso.FORNECEDORES),
    colunas=(
        referencia("Produto", "produto_id", Recurso.PRODUTOS),
        campo("Quantidade", "quantidade"),
        referencia("Fornecedor", "fornecedor_id", Recurso.FORNECEDORES),
        data("Data de Entrada", "data_entrada"),
        campo("Nº Lote", "numero_lote"),
        moeda("Custo", "preco_compra"),
    ),
)

RETIRADAS = EntityAdapter(
    recurso=Recurso.RETIRADAS,
    titulo="Retiradas Cadastradas",
    kind=EntityKind.RETIRADA,
    referencias=(Recurso.PRODUTOS,),
    colunas=(
        referencia("Produto", "produto_id", Recurso.PRODUTOS),
        campo("Quantidade", "quantidade"),
        campo("Tipo de saída", "tipo_retirada"),
        data("Data de Retirada", "data_retirada"),
        campo("Nº Lote", "numero_lote"),
    ),
)

MOVIMENTACOES = EntityAdapter(
    recurso=Recurso.MOVIMENTACOES,
    titulo="Movimentações",
    id_field=None,
    colunas=(
        campo("Produto", "nome"),
        data("Data de Entrada", "data_entrada"),
        data("Data de Retirada", "data_retirada"),
        campo("Qtde. Total de Entrada", "quantidade_total_entrada"),
        campo("Qtde. Total de Saída", "quantidade_total_saida"),
        campo("Qtde. Total em Estoque", "quantidade_em_estoque"),
    ),
)

ADAPTADORES: Dict[Recurso, EntityAdapter] = {
    a.recurso: a for a in (FORNECEDORES, PRODUTOS, ENTRADAS, RETIRADAS, MOVIMENTACOES)
}


def adaptador_para(nome: Any) -> Optional[EntityAdapter]:
    """Adaptador pelo nome do recurso ou do tipo de entidade; None se desconhecido."""
    recurso = Recurso.parse(nome)
    return ADAPTADORES.get(recurso) if recurso else None
