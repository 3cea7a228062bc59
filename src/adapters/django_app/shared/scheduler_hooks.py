"""
Ganchos Django para o monitor de expiração.

O núcleo (`src.core.expiration`) não conhece Django; estes callables
são injetados no ExpirationScheduler pelo container.

- reciclar_conexoes: fecha conexões inutilizáveis ou vencidas
  (CONN_MAX_AGE) da thread do scheduler, que não passa pelos sinais
  request_started/request_finished
- registrar_verificacao / ultima_verificacao: último resultado no cache,
  compartilhado entre web, worker Celery e thread do scheduler
"""

import logging
from typing import Any, Dict, Optional

from django.core.cache import cache
from django.db import close_old_connections

from src.core.expiration import ResultadoVerificacao

logger = logging.getLogger(__name__)

CHAVE_ULTIMA_VERIFICACAO = "expiration_monitor:last_run"


def reciclar_conexoes() -> None:
    close_old_connections()


def registrar_verificacao(resultado: ResultadoVerificacao) -> None:
    """Guarda o resultado serializado sem expiração."""
    cache.set(CHAVE_ULTIMA_VERIFICACAO, resultado.to_dict(), timeout=None)
    logger.debug(f"Última verificação registrada ({resultado.iniciado_em.isoformat()})")


def ultima_verificacao() -> Optional[Dict[str, Any]]:
    return cache.get(CHAVE_ULTIMA_VERIFICACAO)
