# painel_estoque/infra/logger.py
"""
Sistema de logging do painel de estoque.

Este módulo configura e fornece loggers para registrar as operações
relevantes do painel: chamadas à API remota, eventos dos formulários,
eventos das listas (carga, seleção, exclusão) e eventos do sistema.
"""

import logging
from collections import deque
from pathlib import Path
from typing import Dict, Any, Optional

from painel_estoque import config


def print_system(*args, **kwargs):
    """Print controlado pelo ENABLE_OUTPUT."""
    if config.ENABLE_OUTPUT:
        print(*args, **kwargs)


def _enabled() -> bool:
    return config.ENABLE_LOGGING or config.ENABLE_OUTPUT


# Configuração base dos loggers
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

LOGS_DIR = Path(config.LOGS_DIR)

LOG_FILES = {
    "api": LOGS_DIR / "api.log",
    "formularios": LOGS_DIR / "formularios.log",
    "listas": LOGS_DIR / "listas.log",
    "system": LOGS_DIR / "system.log",
}


def setup_logger(name: str, log_file: str, level: int = logging.INFO) -> logging.Logger:
    """
    Configura um logger específico com arquivo de saída.

    O arquivo só é aberto na primeira mensagem emitida (``delay=True``),
    de modo que importar o módulo não cria arquivos quando o logging
    está desabilitado.

    Args:
        name: Nome do logger
        log_file: Caminho do arquivo de log
        level: Nível de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Logger configurado
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    # Remove handlers de configurações anteriores
    while logger.handlers:
        logger.removeHandler(logger.handlers[0])

    if not _enabled():
        logger.addHandler(logging.NullHandler())
        return logger

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_file, encoding='utf-8', delay=True)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(file_handler)

    return logger


# Loggers específicos para cada área
api_logger = setup_logger('painel_estoque.api', str(LOG_FILES["api"]))
form_logger = setup_logger('painel_estoque.formularios', str(LOG_FILES["formularios"]))
list_logger = setup_logger('painel_estoque.listas', str(LOG_FILES["listas"]))
system_logger = setup_logger('painel_estoque.system', str(LOG_FILES["system"]))


def log_api_call(method: str, path: str, status: Optional[int] = None, error: Optional[str] = None) -> None:
    """
    Registra uma chamada à API remota.

    Args:
        method: Verbo HTTP (GET, POST, PUT, DELETE)
        path: Caminho relativo chamado
        status: Código HTTP recebido (opcional)
        error: Mensagem de erro (opcional)
    """
    if not _enabled():
        return
    if error:
        api_logger.error(f"API_FAILED: {method} {path} - status={status} - {error}")
    else:
        api_logger.info(f"API_OK: {method} {path} - status={status}")


def log_form_event(kind: str, action: str, level: str = "info", **kwargs) -> None:
    """
    Log específico para eventos de formulário (rascunhos, validação, envio).

    Args:
        kind: Tipo de entidade do formulário
        action: Ação realizada (set_field, submit, reset, ...)
        level: Nível do log (info, warning, error)
        **kwargs: Dados adicionais
    """
    if not _enabled():
        return
    log_data = {"kind": kind, "action": action, **kwargs}
    log_method = getattr(form_logger, level.lower(), form_logger.info)
    log_method(f"FORM_{action.upper()}: {log_data}")


def log_list_event(resource: str, action: str, level: str = "info", **kwargs) -> None:
    """
    Log específico para eventos das listas (carga, seleção, exclusão, edição).

    Args:
        resource: Recurso listado (fornecedores, produtos, ...)
        action: Ação realizada
        level: Nível do log (info, warning, error)
        **kwargs: Dados adicionais
    """
    if not _enabled():
        return
    log_data = {"resource": resource, "action": action, **kwargs}
    log_method = getattr(list_logger, level.lower(), list_logger.info)
    log_method(f"LIST_{action.upper()}: {log_data}")


def log_system_event(event: str, details: Dict[str, Any] = None, level: str = "info") -> None:
    """
    Log para eventos do sistema.

    Args:
        event: Descrição do evento
        details: Detalhes adicionais (opcional)
        level: Nível do log (info, warning, error)
    """
    if not _enabled():
        return
    log_data = {"event": event, "details": details or {}}
    log_method = getattr(system_logger, level.lower(), system_logger.info)
    log_method(f"SYSTEM_EVENT: {event} - {log_data}")


def get_log_summary(log_type: str = "api", lines: int = 100) -> str:
    """
    Obtém as linhas mais recentes de um arquivo de log.

    Args:
        log_type: Tipo de log (api, formularios, listas, system)
        lines: Número de linhas a retornar

    Returns:
        Conteúdo do log como string
    """
    log_file = LOG_FILES.get(log_type)
    if not log_file or not log_file.exists():
        return f"Log {log_type} não encontrado."

    try:
        with open(log_file, 'r', encoding='utf-8') as f:
            return ''.join(deque(f, maxlen=lines))
    except OSError as e:
        return f"Falha lendo {log_file.name}: {e}"
