"""
Configuração do Utility Ticket Tracker.

Módulos:
- settings: Configurações Django
- urls: Rotas principais
- wsgi: WSGI application
- celery: App Celery (eventos e verificação agendada)
- container: Dependency Injection Container
"""

from .celery import app as celery_app

__all__ = ('celery_app',)
