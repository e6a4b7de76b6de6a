"""
Definição declarativa dos campos de cada formulário.

As telas de cadastro e os modais de edição são montados a partir destas
listas, em vez de um formulário escrito à mão por entidade.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from painel_estoque.domain.models import EntityKind, Recurso


@dataclass(frozen=True)
class CampoForm:
    """Um campo de formulário ligado a um campo do rascunho."""
    nome: str
    rotulo: str
    tipo: str = "text"                       # text | select | date | number | email
    placeholder: str = ""
    referencia: Optional[Recurso] = None     # select alimentado por uma coleção da API
    opcoes: Tuple[str, ...] = ()             # select com opções fixas


TIPOS_CONTA = (
    "Conta Poupança PF",
    "Conta Poupança PJ",
    "Conta Corrente PF",
    "Conta Corrente PJ",
)

CAMPOS: Dict[EntityKind, List[CampoForm]] = {
    EntityKind.FORNECEDOR: [
        CampoForm("nome", "Nome"),
        CampoForm("cnpj", "CNPJ", placeholder="xx.xxx.xxx/0001-xx"),
        CampoForm("telefone", "Telefone", placeholder="(xx)xxxx-xxxx"),
        CampoForm("celular", "Celular", placeholder="(xx)xxxxx-xxxx"),
        CampoForm("email", "E-mail", tipo="email", placeholder="email@email.com"),
        CampoForm("site", "Site"),
        CampoForm("cep", "CEP", placeholder="xxxxx-xxx"),
        CampoForm("endereco", "Endereço"),
        CampoForm("numero_endereco", "Número"),
        CampoForm("bairro", "Bairro"),
        CampoForm("cidade", "Cidade"),
        CampoForm("estado", "UF"),
        CampoForm("banco", "Banco"),
        CampoForm("tipo_conta", "Tipo de Conta", tipo="select", opcoes=TIPOS_CONTA),
        CampoForm("conta", "Conta"),
        CampoForm("agencia_bancaria", "Agência"),
    ],
    EntityKind.PRODUTO: [
        CampoForm("nome", "Nome"),
        CampoForm("marca", "Marca"),
        CampoForm("categoria", "Categoria"),
        CampoForm("fornecedor_id", "Fornecedor", tipo="select", referencia=Recurso.FORNECEDORES),
        CampoForm("picture", "Foto", placeholder="https://..."),
    ],
    EntityKind.ENTRADA: [
        CampoForm("produto_id", "Produto", tipo="select", referencia=Recurso.PRODUTOS),
        CampoForm("quantidade", "Quantidade", tipo="number"),
        CampoForm("fornecedor_id", "Fornecedor", tipo="select", referencia=Recurso.FORNECEDORES),
        CampoForm("data_entrada", "Data de Entrada", tipo="date", placeholder="AAAA-MM-DD"),
        CampoForm("numero_lote", "Número de Lote"),
        CampoForm("preco_compra", "Preço de Compra", tipo="number"),
    ],
    EntityKind.RETIRADA: [
        CampoForm("produto_id", "Produto", tipo="select", referencia=Recurso.PRODUTOS),
        CampoForm("numero_lote", "Número de Lote"),
        CampoForm("quantidade", "Quantidade", tipo="number"),
        CampoForm("data_retirada", "Data de Retirada", tipo="date", placeholder="AAAA-MM-DD"),
        CampoForm("tipo_retirada", "Tipo de Saída"),
    ],
}


def referencias_do_formulario(kind: EntityKind) -> List[Recurso]:
    """Coleções que precisam ser buscadas para popular os selects de ``kind``."""
    vistos: List[Recurso] = []
    for campo in CAMPOS.get(kind, []):
        if campo.referencia is not None and campo.referencia not in vistos:
            vistos.append(campo.referencia)
    return vistos
