"""
Formatação de valores para exibição (moeda e datas).

A API guarda datas em ISO (``YYYY-MM-DD`` ou data/hora completa) e preços
como números; a interface mostra ``DD/MM/YYYY`` e moeda local. Valores
vazios ou inválidos viram texto vazio, nunca exceção.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Tuple

from painel_estoque.config import DEFAULTS
from painel_estoque.domain.parsers import parse_decimal

_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")

# locale -> (separador de milhar, separador decimal, padrão)
_LOCALES: Dict[str, Tuple[str, str, str]] = {
    "pt-BR": (".", ",", "{simbolo} {valor}"),
    "en-US": (",", ".", "{simbolo}{valor}"),
}

_SIMBOLOS = {"BRL": "R$", "USD": "$", "EUR": "€"}


def formatar_moeda(value: Any, locale: str = DEFAULTS.locale, currency: str = DEFAULTS.moeda) -> str:
    """Formata um valor como moeda.

    Exemplos:
        formatar_moeda(1000)                  → "R$ 1.000,00"
        formatar_moeda(1000, "en-US", "USD")  → "$1,000.00"
        formatar_moeda("12,5")                → "R$ 12,50"
    """
    num = parse_decimal(value)
    if num is None:
        return ""
    milhar, decimal, padrao = _LOCALES.get(locale, _LOCALES["pt-BR"])
    simbolo = _SIMBOLOS.get(currency.upper(), currency.upper())
    corpo = f"{abs(num):,.2f}".replace(",", "X").replace(".", decimal).replace("X", milhar)
    texto = padrao.format(simbolo=simbolo, valor=corpo)
    return f"-{texto}" if num < 0 else texto


def formatar_data(value: Any) -> str:
    """Converte ``YYYY-MM-DD`` (ou data/hora ISO) para ``DD/MM/YYYY``.

    Usa a parte de data como escrita pela API, sem conversão de fuso.
    """
    if not value:
        return ""
    m = _DATE_RE.match(str(value).strip())
    if not m:
        return ""
    ano, mes, dia = m.groups()
    return f"{dia}/{mes}/{ano}"
