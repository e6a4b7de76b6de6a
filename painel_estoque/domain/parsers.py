"""
Utilidades de parsing para valores digitados nos formulários.

Os campos dos formulários chegam como texto. Este módulo interpreta
quantidades, preços e identificadores de forma tolerante: vírgula ou
ponto como separador decimal, separador de milhar no padrão brasileiro
e espaços sobrando.
"""

from __future__ import annotations

import re
from typing import Any, Optional

_NUM_RE = re.compile(r"^[-+]?\d+(?:[.,]\d+)?$")
# Milhar só é reconhecido com dois ou mais grupos, ou com a parte decimal
# presente: "1.234" sozinho é decimal (formato de valores vindos da API).
_BR_THOUSANDS_RE = re.compile(r"^[-+]?\d{1,3}(?:(?:\.\d{3}){2,}(?:,\d+)?|(?:\.\d{3})+,\d+)$")
_US_THOUSANDS_RE = re.compile(r"^[-+]?\d{1,3}(?:(?:,\d{3}){2,}(?:\.\d+)?|(?:,\d{3})+\.\d+)$")


def parse_decimal(txt: Any) -> Optional[float]:
    """Interpreta um número decimal.

    Exemplos:
        "12,50"    → 12.5
        "1.234,56" → 1234.56
        "1,234.56" → 1234.56
        "1.234"    → 1.234
        "R$ 10"    → None (símbolos não são aceitos)
        ""         → None

    Args:
        txt: Texto (ou número) a ser interpretado.

    Returns:
        O valor como float, ou None se não for possível interpretar.
    """
    if txt is None or isinstance(txt, bool):
        return None
    if isinstance(txt, (int, float)):
        return float(txt)
    s = str(txt).strip().replace(" ", "")
    if not s:
        return None
    if _BR_THOUSANDS_RE.match(s):
        s = s.replace(".", "").replace(",", ".")
    elif _US_THOUSANDS_RE.match(s):
        s = s.replace(",", "")
    elif _NUM_RE.match(s):
        s = s.replace(",", ".")
    else:
        return None
    try:
        return float(s)
    except ValueError:
        return None


def parse_inteiro_positivo(txt: Any) -> Optional[int]:
    """Interpreta uma quantidade inteira estritamente positiva.

    "3" → 3, "3,0" → 3, "2.5" → None, "0" → None, "-1" → None.
    """
    num = parse_decimal(txt)
    if num is None or num <= 0 or not float(num).is_integer():
        return None
    return int(num)


def parse_id(txt: Any) -> Any:
    """Normaliza um identificador vindo de um campo de seleção.

    Texto só com dígitos vira int (a API usa ids numéricos); vazio vira
    None; qualquer outro valor é devolvido sem alteração.
    """
    if txt is None:
        return None
    if isinstance(txt, bool):
        return txt
    if isinstance(txt, int):
        return txt
    s = str(txt).strip()
    if not s:
        return None
    if s.isdigit():
        return int(s)
    return s
