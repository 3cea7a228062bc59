"""
Entidades do Domínio de Alertas.

Um alerta é uma notificação derivada do ciclo de vida de um ticket
(expiração próxima, expiração, renovação, fechamento). Referencia o
ticket apenas por ID.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
import math
import uuid

from src.core.shared.clock import utc_agora
from src.core.shared.exceptions import ValidationError


LIMITE_HORAS_ALTA = 24

MENSAGEM_EXPIRADO = "Ticket has expired and been automatically marked as expired"
MENSAGEM_FECHADO = "Ticket has been closed"


class AlertType(Enum):
    EXPIRANDO = "expiring_soon"
    EXPIRADO = "expired"
    RENOVADO = "renewed"
    FECHADO = "closed"


class AlertSeverity(Enum):
    BAIXA = "low"
    MEDIA = "medium"
    ALTA = "high"
    CRITICA = "critical"


@dataclass
class AlertEntity:
    """
    Entidade de Domínio: Alerta.

    Imutável após criação, exceto o indicador `lido`.

    Attributes:
        id: Identificador único (UUID)
        ticket_id: Ticket ao qual o alerta se refere
        tipo: Tipo do alerta
        mensagem: Texto exibido ao usuário
        severidade: Severidade (default medium)
        lido: Se já foi lido
        criado_em: Data/hora de criação
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    ticket_id: str = ""
    tipo: AlertType = AlertType.EXPIRANDO
    mensagem: str = ""
    severidade: AlertSeverity = AlertSeverity.MEDIA
    lido: bool = False
    criado_em: datetime = field(default_factory=utc_agora)

    @classmethod
    def criar(
        cls,
        ticket_id: str,
        tipo: AlertType,
        mensagem: str,
        severidade: AlertSeverity = AlertSeverity.MEDIA,
        agora: Optional[datetime] = None,
    ) -> "AlertEntity":
        """
        Factory method com validações.

        Raises:
            ValidationError: Se ticket_id ou mensagem ausentes
        """
        if not ticket_id:
            raise ValidationError("Ticket ID is required", field="ticketId")

        mensagem = (mensagem or "").strip()
        if not mensagem:
            raise ValidationError("Alert message is required", field="message")

        return cls(
            ticket_id=ticket_id,
            tipo=tipo,
            mensagem=mensagem,
            severidade=severidade,
            criado_em=agora or utc_agora(),
        )

    @classmethod
    def para_expiracao(
        cls,
        ticket_id: str,
        horas: float,
        agora: Optional[datetime] = None,
    ) -> "AlertEntity":
        """
        Classifica um alerta de expiração pelas horas restantes.

        Regras:
        - horas <= 0       → expired / critical
        - 0 < horas <= 24  → expiring_soon / high, "N hours" (N = ceil)
        - horas > 24       → expiring_soon / medium, "N days" (N = ceil(horas/24))

        Args:
            ticket_id: Ticket de referência
            horas: Horas (fracionárias) até a expiração

        Example:
            >>> AlertEntity.para_expiracao("t1", 5.2).mensagem
            'Ticket will expire in 6 hours'
        """
        if horas <= 0:
            return cls.criar(ticket_id, AlertType.EXPIRADO, MENSAGEM_EXPIRADO, AlertSeverity.CRITICA, agora)

        if horas <= LIMITE_HORAS_ALTA:
            return cls.criar(
                ticket_id,
                AlertType.EXPIRANDO,
                f"Ticket will expire in {math.ceil(horas)} hours",
                AlertSeverity.ALTA,
                agora,
            )

        return cls.criar(
            ticket_id,
            AlertType.EXPIRANDO,
            f"Ticket will expire in {math.ceil(horas / 24)} days",
            AlertSeverity.MEDIA,
            agora,
        )

    @classmethod
    def para_renovacao(
        cls,
        ticket_id: str,
        dias: int,
        nova_expiracao: datetime,
        agora: Optional[datetime] = None,
    ) -> "AlertEntity":
        return cls.criar(
            ticket_id,
            AlertType.RENOVADO,
            f"Ticket renewed for {dias} days. New expiration: {nova_expiracao.date().isoformat()}",
            AlertSeverity.BAIXA,
            agora,
        )

    @classmethod
    def para_fechamento(cls, ticket_id: str, agora: Optional[datetime] = None) -> "AlertEntity":
        return cls.criar(ticket_id, AlertType.FECHADO, MENSAGEM_FECHADO, AlertSeverity.BAIXA, agora)

    def marcar_lido(self, lido: bool = True) -> bool:
        """Altera o indicador de leitura. Retorna True se mudou."""
        if self.lido == lido:
            return False
        self.lido = lido
        return True

    def __repr__(self) -> str:
        return (
            f"AlertEntity(id={self.id[:8]}..., ticket={self.ticket_id[:8]}..., "
            f"tipo={self.tipo.value}, severidade={self.severidade.value})"
        )
