"""
Monitor de expiração de tickets.

- PoliticaExpiracao: janelas e intervalo
- ExpirationMonitorService: uma verificação (alertas + expiração)
- ExpirationScheduler: start()/stop() em thread própria
"""

from .policy import PoliticaExpiracao
from .monitor import ExpirationMonitorService, ResultadoVerificacao
from .scheduler import ExpirationScheduler

__all__ = [
    "PoliticaExpiracao",
    "ExpirationMonitorService",
    "ResultadoVerificacao",
    "ExpirationScheduler",
]
