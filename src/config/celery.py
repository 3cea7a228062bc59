"""
Configuração do Celery para processamento assíncrono.

O Celery é usado para:
- Processar Domain Events de tickets (notificações)
- Executar a verificação periódica de expiração (beat)

Uso:
    # Worker
    celery -A src.config.celery worker -l INFO -Q default,events,monitor

    # Beat (verificação de expiração ao iniciar e a cada 30 minutos)
    celery -A src.config.celery beat -l INFO
"""

import os
from celery import Celery
from celery.signals import beat_init
from kombu import Exchange, Queue

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

app = Celery('ticket_tracker')

EXPIRATION_CHECK_TASK = 'src.adapters.django_app.events.handlers.run_expiration_check'

# Broker, backend e serialização vêm de CELERY_* em settings
app.config_from_object('django.conf:settings', namespace='CELERY')

app.conf.task_default_queue = 'default'

app.conf.task_queues = (
    Queue('default', Exchange('default'), routing_key='default'),
    Queue('events', Exchange('events'), routing_key='events.#'),
    Queue('monitor', Exchange('monitor'), routing_key='monitor.#'),
)

app.conf.task_routes = {
    EXPIRATION_CHECK_TASK: {'queue': 'monitor'},
    'src.adapters.django_app.events.handlers.*': {'queue': 'events'},
}

app.autodiscover_tasks(['src.adapters.django_app.events'], related_name='handlers')

app.conf.beat_schedule = {
    'expiration-check': {
        'task': EXPIRATION_CHECK_TASK,
        'schedule': float(os.getenv('EXPIRATION_CHECK_INTERVAL_SECONDS', 1800)),
        'options': {'expires': 1700},
    },
}


@beat_init.connect
def verificar_expiracao_ao_iniciar(sender=None, **kwargs):
    """Enfileira uma verificação assim que o beat sobe; o intervalo vale a partir daí."""
    app.send_task(EXPIRATION_CHECK_TASK)
