"""
Configuração do Django App para Tickets.

Quando EXPIRATION_MONITOR_AUTOSTART está ativo, inicia o scheduler
do monitor de expiração no processo e o para na saída do interpretador.
"""

import atexit
import logging

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class TicketsConfig(AppConfig):
    """Configuração do app Tickets."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.tickets'
    label = 'tickets'
    verbose_name = 'Tickets e Alertas'

    def ready(self):
        if not getattr(settings, 'EXPIRATION_MONITOR_AUTOSTART', False):
            return

        from src.config.container import get_container

        scheduler = get_container().expiration_scheduler()
        if scheduler.start():
            atexit.register(scheduler.stop, timeout=10)
            logger.info("Monitor de expiração iniciado pelo app tickets")
