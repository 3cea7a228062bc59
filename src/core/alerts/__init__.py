"""
Domínio de Alertas.

Notificações derivadas do ciclo de vida dos tickets: expiração
próxima, expiração, renovação e fechamento.
"""

from .entities import AlertEntity, AlertType, AlertSeverity
from .dtos import AlertOutputDTO, EstatisticasAlertasDTO, ListarAlertasQueryDTO
from .ports import AlertRepository, InMemoryAlertRepository
from .use_cases import (
    ListarAlertasService,
    ObterAlertaService,
    AtualizarAlertaService,
    MarcarTodosComoLidosService,
    ExcluirAlertaService,
    EstatisticasAlertasService,
)

__all__ = [
    "AlertEntity",
    "AlertType",
    "AlertSeverity",
    "AlertOutputDTO",
    "EstatisticasAlertasDTO",
    "ListarAlertasQueryDTO",
    "AlertRepository",
    "InMemoryAlertRepository",
    "ListarAlertasService",
    "ObterAlertaService",
    "AtualizarAlertaService",
    "MarcarTodosComoLidosService",
    "ExcluirAlertaService",
    "EstatisticasAlertasService",
]
