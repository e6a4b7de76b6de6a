"""
Regras de validação e de exibição do painel de estoque.

Este módulo concentra as regras de negócio usadas pelas telas:
quais campos são obrigatórios em cada cadastro, como validar um
rascunho antes do envio e como resolver referências fracas (ids de
produto/fornecedor) em nomes para exibição.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from painel_estoque.config import DEFAULTS
from painel_estoque.domain.parsers import parse_inteiro_positivo
from painel_estoque.domain.models import EntityKind

# Campos obrigatórios nos formulários de cadastro, com o rótulo usado na mensagem.
CAMPOS_OBRIGATORIOS: Dict[EntityKind, Dict[str, str]] = {
    EntityKind.FORNECEDOR: {
        "nome": "Nome",
        "cnpj": "CNPJ",
        "celular": "Celular",
        "email": "E-mail",
        "cep": "CEP",
        "endereco": "Endereço",
        "bairro": "Bairro",
        "cidade": "Cidade",
        "estado": "Estado",
    },
    EntityKind.PRODUTO: {
        "nome": "Nome",
        "categoria": "Categoria",
        "fornecedor_id": "Fornecedor",
        "marca": "Marca",
    },
    EntityKind.ENTRADA: {
        "produto_id": "Produto",
        "quantidade": "Quantidade",
        "fornecedor_id": "Fornecedor",
        "data_entrada": "Data de Entrada",
        "numero_lote": "Número de Lote",
        "preco_compra": "Preço de Compra",
    },
    EntityKind.RETIRADA: {
        "produto_id": "Produto",
        "quantidade": "Quantidade",
        "tipo_retirada": "Tipo de Saída",
        "data_retirada": "Data de Retirada",
        "numero_lote": "Número de Lote",
    },
}

MENSAGEM_OBRIGATORIOS = "Preencha todos os campos obrigatórios."


def _vazio(val: Any) -> bool:
    if val is None:
        return True
    if isinstance(val, str):
        return not val.strip()
    return False


def validar_cadastro(kind: EntityKind, draft: Any) -> Dict[str, str]:
    """Valida um rascunho de cadastro.

    Regras:
        - Todo campo de ``CAMPOS_OBRIGATORIOS[kind]`` precisa estar preenchido.
        - ``quantidade`` (entrada/retirada), quando preenchida, precisa ser
          um inteiro positivo.

    Args:
        kind: Tipo de entidade do formulário.
        draft: Rascunho (dataclass) a validar.

    Returns:
        Dicionário ``campo -> mensagem``; vazio quando o rascunho é válido.
    """
    erros: Dict[str, str] = {}
    for campo, rotulo in CAMPOS_OBRIGATORIOS.get(kind, {}).items():
        if _vazio(getattr(draft, campo, None)):
            erros[campo] = f"O campo {rotulo} é obrigatório."

    if kind in (EntityKind.ENTRADA, EntityKind.RETIRADA) and "quantidade" not in erros:
        if parse_inteiro_positivo(getattr(draft, "quantidade", None)) is None:
            erros["quantidade"] = "O campo Quantidade deve ser um número inteiro positivo."
    return erros


def validar_edicao(kind: EntityKind, draft: Any) -> Dict[str, str]:
    """Validação do modal de edição.

    Sempre aprova: os registros editados já passaram pela validação do
    cadastro. A diferença em relação a ``validar_cadastro`` é mantida de
    propósito até haver decisão sobre unificar as duas.
    """
    return {}


# -----------------------
# referências fracas
# -----------------------

def _chave(val: Any) -> Optional[str]:
    if val is None:
        return None
    s = str(val).strip()
    return s or None


def indexar_por_id(colecao: Iterable[Mapping[str, Any]], id_field: str = "id") -> Dict[str, Mapping[str, Any]]:
    """Indexa uma coleção pelo id em texto (``10`` e ``"10"`` viram a mesma chave)."""
    idx: Dict[str, Mapping[str, Any]] = {}
    for item in colecao or []:
        if not isinstance(item, Mapping):
            continue
        k = _chave(item.get(id_field))
        if k is not None:
            idx[k] = item
    return idx


def resolver_nome(
    ref_id: Any,
    indice: Mapping[str, Mapping[str, Any]],
    campo: str = "nome",
    padrao: str = DEFAULTS.rotulo_desconhecido,
) -> str:
    """Resolve uma referência fraca em nome de exibição.

    Qualquer falha (id vazio, id ausente, registro sem nome) devolve o
    rótulo padrão; nunca levanta exceção.
    """
    k = _chave(ref_id)
    if k is None:
        return padrao
    registro = indice.get(k)
    if not registro:
        return padrao
    nome = registro.get(campo)
    if nome is None or (isinstance(nome, str) and not nome.strip()):
        return padrao
    return str(nome)


def reconciliar_selecao(selecionados: Iterable[Any], ids_carregados: Iterable[Any]) -> List[Any]:
    """Mantém na seleção apenas ids presentes na coleção carregada (ordem preservada)."""
    presentes = set(ids_carregados)
    return [i for i in selecionados if i in presentes]
