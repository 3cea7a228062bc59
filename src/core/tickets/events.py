"""
Domain Events do Domínio de Tickets.

Eventos:
- TicketCriadoEvent: Novo ticket foi criado
- TicketAtualizadoEvent: Campos do ticket foram alterados
- TicketRenovadoEvent: Prazo foi estendido
- TicketFechadoEvent: Ticket foi fechado
- TicketExpiradoEvent: Monitor marcou o ticket como expirado
- TicketExcluidoEvent: Ticket foi excluído por um administrador

Uso:
    Eventos são criados nos use cases e publicados através do
    UnitOfWork após commit bem-sucedido.

    with uow:
        ticket = TicketEntity.criar(...)
        repo.add(ticket)
        uow.publish_event(TicketCriadoEvent(aggregate_id=ticket.id, ...))
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from src.core.shared.clock import utc_agora
from src.core.shared.events import DomainEvent


@dataclass
class TicketEvent(DomainEvent):
    """Base dos eventos cujo agregado é um Ticket."""

    numero: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Ticket"


@dataclass
class TicketCriadoEvent(TicketEvent):
    """
    Evento: Ticket foi criado.

    Handlers típicos:
    - Notificar o contratado responsável
    - Registrar em auditoria

    Attributes:
        criado_por_id: ID do usuário que criou
        atribuido_a_id: ID do responsável
        organizacao: Organização solicitante
        data_expiracao: Prazo inicial
    """

    criado_por_id: str = ""
    atribuido_a_id: str = ""
    organizacao: str = ""
    data_expiracao: datetime = field(default_factory=utc_agora)

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "numero": self.numero,
            "criado_por_id": self.criado_por_id,
            "atribuido_a_id": self.atribuido_a_id,
            "organizacao": self.organizacao,
            "data_expiracao": self.data_expiracao.isoformat(),
        }


@dataclass
class TicketAtualizadoEvent(TicketEvent):
    """
    Evento: Ticket foi atualizado.

    Attributes:
        alterado_por_id: ID de quem alterou
        campos: Nomes (API) dos campos alterados
        status_anterior: Status antes da alteração, se mudou
    """

    alterado_por_id: str = ""
    campos: List[str] = field(default_factory=list)
    status_anterior: Optional[str] = None

    def _get_event_data(self) -> Dict[str, Any]:
        data = {
            "numero": self.numero,
            "alterado_por_id": self.alterado_por_id,
            "campos": list(self.campos),
        }
        if self.status_anterior:
            data["status_anterior"] = self.status_anterior
        return data


@dataclass
class TicketRenovadoEvent(TicketEvent):
    """
    Evento: Ticket foi renovado.

    Handlers típicos:
    - Notificar organização solicitante do novo prazo
    """

    renovado_por_id: str = ""
    dias: int = 0
    nova_expiracao: datetime = field(default_factory=utc_agora)

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "numero": self.numero,
            "renovado_por_id": self.renovado_por_id,
            "dias": self.dias,
            "nova_expiracao": self.nova_expiracao.isoformat(),
        }


@dataclass
class TicketFechadoEvent(TicketEvent):
    """Evento: Ticket foi fechado."""

    fechado_por_id: str = ""

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "numero": self.numero,
            "fechado_por_id": self.fechado_por_id,
        }


@dataclass
class TicketExpiradoEvent(TicketEvent):
    """
    Evento: Monitor de expiração marcou o ticket como expirado.

    Attributes:
        data_expiracao: Prazo que foi ultrapassado
        atribuido_a_id: Responsável a ser notificado
    """

    data_expiracao: datetime = field(default_factory=utc_agora)
    atribuido_a_id: str = ""

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "numero": self.numero,
            "data_expiracao": self.data_expiracao.isoformat(),
            "atribuido_a_id": self.atribuido_a_id,
        }


@dataclass
class TicketExcluidoEvent(TicketEvent):
    """Evento: Ticket (e seus alertas) foi excluído."""

    excluido_por_id: str = ""
    alertas_removidos: int = 0

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "numero": self.numero,
            "excluido_por_id": self.excluido_por_id,
            "alertas_removidos": self.alertas_removidos,
        }
