# painel_estoque/domain/models.py
"""
Modelos (dataclasses) do domínio.

Cada tipo de entidade editável tem uma dataclass de rascunho cujos campos
usam os nomes do contrato da API. Os valores padrão formam o "modelo vazio"
do formulário. Registros vindos da API continuam sendo dicionários; as
dataclasses representam apenas os rascunhos em edição.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any, Dict, List, Optional


class EntityKind(str, Enum):
    """Tipos de entidade com rascunho próprio no Form Store."""
    FORNECEDOR = "fornecedor"
    PRODUTO = "produto"
    ENTRADA = "entrada"
    RETIRADA = "retirada"
    USUARIO = "usuario"

    @classmethod
    def parse(cls, value: Any) -> Optional["EntityKind"]:
        """Converte um nome (pt ou en) em EntityKind; None se desconhecido."""
        if isinstance(value, EntityKind):
            return value
        if value is None:
            return None
        return _KIND_ALIASES.get(str(value).strip().lower())


_KIND_ALIASES: Dict[str, EntityKind] = {
    "fornecedor": EntityKind.FORNECEDOR,
    "fornecedores": EntityKind.FORNECEDOR,
    "supplier": EntityKind.FORNECEDOR,
    "produto": EntityKind.PRODUTO,
    "produtos": EntityKind.PRODUTO,
    "product": EntityKind.PRODUTO,
    "entrada": EntityKind.ENTRADA,
    "entradas": EntityKind.ENTRADA,
    "stockin": EntityKind.ENTRADA,
    "stock-in": EntityKind.ENTRADA,
    "retirada": EntityKind.RETIRADA,
    "retiradas": EntityKind.RETIRADA,
    "stockout": EntityKind.RETIRADA,
    "stock-out": EntityKind.RETIRADA,
    "usuario": EntityKind.USUARIO,
    "usuário": EntityKind.USUARIO,
    "user": EntityKind.USUARIO,
}


class Recurso(str, Enum):
    """Coleções expostas pela API remota (valor = caminho)."""
    FORNECEDORES = "fornecedores"
    PRODUTOS = "produtos"
    ENTRADAS = "entradas"
    RETIRADAS = "retiradas"
    MOVIMENTACOES = "movimentacoes"

    @property
    def path(self) -> str:
        return f"/{self.value}"

    def item_path(self, item_id: Any) -> str:
        return f"/{self.value}/{item_id}"

    @classmethod
    def parse(cls, value: Any) -> Optional["Recurso"]:
        """Aceita o nome da coleção ou um tipo de entidade; None se desconhecido."""
        if isinstance(value, Recurso):
            return value
        s = str(value or "").strip().lower().lstrip("/")
        for r in cls:
            if r.value == s:
                return r
        kind = EntityKind.parse(s)
        return RECURSO_POR_TIPO.get(kind) if kind else None


@dataclass
class Fornecedor:
    """Rascunho de fornecedor (dados cadastrais, endereço e bancários)."""
    id: Optional[Any] = None
    nome: str = ""
    cnpj: str = ""
    telefone: str = ""
    celular: str = ""
    email: str = ""
    site: str = ""
    cep: str = ""
    endereco: str = ""
    numero_endereco: str = ""
    bairro: str = ""
    cidade: str = ""
    estado: str = ""
    banco: str = ""
    tipo_conta: str = ""
    conta: str = ""
    agencia_bancaria: str = ""


@dataclass
class Produto:
    """Rascunho de produto. ``fornecedor_id`` é referência fraca."""
    id: Optional[Any] = None
    nome: str = ""
    marca: str = ""
    categoria: str = ""
    fornecedor_id: Any = ""
    picture: str = ""


@dataclass
class Entrada:
    """Rascunho de entrada de estoque."""
    id: Optional[Any] = None
    produto_id: Any = ""
    quantidade: Any = ""
    fornecedor_id: Any = ""
    data_entrada: str = ""
    numero_lote: str = ""
    preco_compra: Any = ""


@dataclass
class Retirada:
    """Rascunho de retirada (saída) de estoque."""
    id: Optional[Any] = None
    produto_id: Any = ""
    quantidade: Any = ""
    tipo_retirada: str = ""
    data_retirada: str = ""
    numero_lote: str = ""


@dataclass
class Usuario:
    """Rascunho de usuário (sem endpoint na API; mantido apenas no Form Store)."""
    id: Optional[Any] = None
    nome: str = ""
    cpf: str = ""
    telefone: str = ""
    celular: str = ""
    email: str = ""
    data_nascimento: str = ""
    usuario: str = ""
    senha: str = ""
    picture: str = ""


DRAFT_TYPES: Dict[EntityKind, type] = {
    EntityKind.FORNECEDOR: Fornecedor,
    EntityKind.PRODUTO: Produto,
    EntityKind.ENTRADA: Entrada,
    EntityKind.RETIRADA: Retirada,
    EntityKind.USUARIO: Usuario,
}


# Usuário não tem coleção na API.
RECURSO_POR_TIPO: Dict[EntityKind, Recurso] = {
    EntityKind.FORNECEDOR: Recurso.FORNECEDORES,
    EntityKind.PRODUTO: Recurso.PRODUTOS,
    EntityKind.ENTRADA: Recurso.ENTRADAS,
    EntityKind.RETIRADA: Recurso.RETIRADAS,
}


def field_names(kind: EntityKind) -> List[str]:
    """Campos do rascunho de ``kind`` (inclui ``id``)."""
    return [f.name for f in fields(DRAFT_TYPES[kind])]


def empty_draft(kind: EntityKind) -> Any:
    """Modelo vazio do tipo de entidade."""
    return DRAFT_TYPES[kind]()


def draft_from_record(kind: EntityKind, record: Dict[str, Any]) -> Any:
    """
    Monta um rascunho a partir de um registro da API.

    Substituição total: campos ausentes no registro voltam ao valor do
    modelo vazio. Chaves desconhecidas são descartadas e ``None`` em campos
    de formulário vira texto vazio.
    """
    cls = DRAFT_TYPES[kind]
    values: Dict[str, Any] = {}
    for f in fields(cls):
        if f.name not in record:
            continue
        val = record[f.name]
        if val is None and f.name != "id":
            continue
        values[f.name] = val
    return cls(**values)


def draft_to_payload(draft: Any, include_id: bool = False) -> Dict[str, Any]:
    """Converte o rascunho no corpo JSON enviado à API."""
    payload = asdict(draft)
    if not include_id or payload.get("id") is None:
        payload.pop("id", None)
    return payload
