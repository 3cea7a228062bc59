"""
Event Handlers - Processadores de Eventos de Domínio.

Tasks Celery executadas quando o CeleryEventPublisher despacha
um evento. O payload recebido é o `DomainEvent.to_dict()`:

    {
        "event_id": ..., "event_type": ..., "aggregate_id": ...,
        "occurred_at": ..., "version": 1, "data": {...}
    }

Também contém a task periódica da verificação de expiração,
agendada pelo Celery Beat (ver src/config/celery.py).

Padrão:
    @shared_task(bind=True, ...)
    def handle_<evento>(self, event_data: dict) -> None:
        ...
"""

import logging
from typing import Any, Dict

from celery import shared_task

logger = logging.getLogger(__name__)


def _dados(event_data: Dict[str, Any]) -> Dict[str, Any]:
    return event_data.get("data") or {}


# =============================================================================
# Event Handlers - Tickets
# =============================================================================

@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_ticket_criado(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para TicketCriadoEvent.

    Notifica o contratado responsável quando o ticket foi
    criado por outra pessoa (administrador).
    """
    dados = _dados(event_data)
    numero = dados.get("numero")
    atribuido_a_id = dados.get("atribuido_a_id")

    logger.info(
        f"[HANDLER] TicketCriado: {numero} | "
        f"Responsável: {atribuido_a_id} | Organização: {dados.get('organizacao')}"
    )

    if atribuido_a_id and atribuido_a_id != dados.get("criado_por_id"):
        notify_user.delay(
            user_id=atribuido_a_id,
            message=f"Ticket {numero} foi atribuído a você",
        )


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_ticket_renovado(self, event_data: Dict[str, Any]) -> None:
    """Handler para TicketRenovadoEvent."""
    dados = _dados(event_data)
    logger.info(
        f"[HANDLER] TicketRenovado: {dados.get('numero')} | "
        f"+{dados.get('dias')} dias | Novo prazo: {dados.get('nova_expiracao')}"
    )


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_ticket_fechado(self, event_data: Dict[str, Any]) -> None:
    """Handler para TicketFechadoEvent."""
    dados = _dados(event_data)
    logger.info(
        f"[HANDLER] TicketFechado: {dados.get('numero')} | "
        f"Fechado por: {dados.get('fechado_por_id')}"
    )


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_ticket_expirado(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para TicketExpiradoEvent.

    O alerta crítico já foi gravado pelo monitor; aqui apenas
    avisamos o responsável fora do sistema.
    """
    dados = _dados(event_data)
    numero = dados.get("numero")
    atribuido_a_id = dados.get("atribuido_a_id")

    logger.warning(
        f"[HANDLER] TicketExpirado: {numero} | "
        f"Prazo: {dados.get('data_expiracao')}"
    )

    if atribuido_a_id:
        notify_user.delay(
            user_id=atribuido_a_id,
            message=f"Ticket {numero} expirou e precisa ser renovado",
            priority="high",
        )


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_ticket_excluido(self, event_data: Dict[str, Any]) -> None:
    """Handler para TicketExcluidoEvent (trilha de auditoria em log)."""
    dados = _dados(event_data)
    logger.info(
        f"[HANDLER] TicketExcluido: {dados.get('numero')} | "
        f"Por: {dados.get('excluido_por_id')} | "
        f"Alertas removidos: {dados.get('alertas_removidos', 0)}"
    )


# =============================================================================
# Event Dispatcher (Router)
# =============================================================================

EVENT_HANDLERS = {
    "TicketCriadoEvent": handle_ticket_criado,
    "TicketRenovadoEvent": handle_ticket_renovado,
    "TicketFechadoEvent": handle_ticket_fechado,
    "TicketExpiradoEvent": handle_ticket_expirado,
    "TicketExcluidoEvent": handle_ticket_excluido,
}


@shared_task(bind=True, max_retries=5, default_retry_delay=30)
def dispatch_domain_event(self, event_type: str, event_data: Dict[str, Any]) -> bool:
    """
    Dispatcher central para Domain Events.

    Args:
        event_type: Tipo do evento (ex: 'TicketRenovadoEvent')
        event_data: Evento serializado

    Returns:
        True se havia handler para o tipo
    """
    handler = EVENT_HANDLERS.get(event_type)

    if handler is None:
        logger.debug(f"[DISPATCHER] Sem handler para {event_type}")
        return False

    logger.info(f"[DISPATCHER] Roteando {event_type} para {handler.name}")
    handler.delay(event_data)
    return True


# =============================================================================
# Notification Tasks
# =============================================================================

@shared_task(bind=True, max_retries=3, default_retry_delay=120)
def notify_user(self, user_id: str, message: str, priority: str = "normal") -> None:
    """
    Notifica usuário.

    Entrega registrada em log; o canal real (email/push) fica a
    cargo do ambiente de implantação.
    """
    logger.info(f"[NOTIFICATION] [{priority}] para {user_id}: {message}")


# =============================================================================
# Scheduled Tasks (Beat)
# =============================================================================

@shared_task(bind=True, ignore_result=False)
def run_expiration_check(self) -> Dict[str, Any]:
    """
    Executa uma verificação de expiração.

    Agendada pelo Celery Beat a cada EXPIRATION_CHECK_INTERVAL_SECONDS
    e enfileirada uma vez quando o beat inicia. Passa pelo scheduler para
    que o resultado fique visível em GET /api/monitor/.
    Uma verificação com falha é registrada e nunca propagada ao worker.

    Returns:
        ResultadoVerificacao serializado (vazio em falha)
    """
    logger.info("[SCHEDULED] Iniciando verificação de expiração")

    try:
        # Importação tardia para evitar circular import
        from src.config.container import get_container

        resultado = get_container().expiration_scheduler().executar_agora()
        return resultado.to_dict()

    except Exception:
        logger.exception("Erro na verificação de expiração agendada")
        return {}
