# painel_estoque/config.py
"""
Configurações globais e valores padrão do painel de estoque.

Todos os valores podem ser sobrescritos por variáveis de ambiente:
- PAINEL_API_URL      -> endereço base da API de estoque
- PAINEL_PREFS_DB     -> caminho do SQLite de preferências da interface
- PAINEL_LOGS_DIR     -> diretório dos arquivos de log
- PAINEL_LOG=1        -> habilita logging em arquivo
- PAINEL_OUTPUT=1     -> habilita prints de diagnóstico
"""

import os
from dataclasses import dataclass


def _env_flag(name: str, default: bool = False) -> bool:
    val = os.environ.get(name)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "sim", "s", "yes", "y", "on"}


# Endereço base da API remota (fornecedores, produtos, entradas, retiradas, movimentações)
API_BASE_URL = os.environ.get(
    "PAINEL_API_URL", "https://projeto-orientado-backend.onrender.com/"
)

# Caminho padrão do banco de preferências (SQLite)
PREFS_DB_PATH = os.environ.get(
    "PAINEL_PREFS_DB", os.path.join(os.getcwd(), "painel_prefs.db")
)

# Diretório padrão dos logs
LOGS_DIR = os.environ.get("PAINEL_LOGS_DIR", os.path.join(os.getcwd(), "logs"))

ENABLE_LOGGING = _env_flag("PAINEL_LOG")
ENABLE_OUTPUT = _env_flag("PAINEL_OUTPUT")


@dataclass
class DefaultConfig:
    """Valores padrão para parâmetros do painel."""
    timeout_s: float = 30.0          # timeout por requisição HTTP
    max_exclusoes_paralelas: int = 4  # limite de DELETEs simultâneos na exclusão em lote
    locale: str = "pt-BR"
    moeda: str = "BRL"
    rotulo_desconhecido: str = "Desconhecido"


# Instância global dos valores padrão
DEFAULTS = DefaultConfig()
