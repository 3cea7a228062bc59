"""
DTOs do Domínio de Alertas.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, Optional

from src.core.shared.exceptions import ValidationError

from .entities import AlertEntity, AlertType


POR_PAGINA_PADRAO = 50
POR_PAGINA_MAXIMO = 100


@dataclass
class AlertOutputDTO:
    """Alerta no formato exposto pela API."""

    id: str
    ticket_id: str
    tipo: str
    mensagem: str
    severidade: str
    lido: bool
    criado_em: datetime
    ticket: Optional[Dict] = None

    @classmethod
    def from_entity(cls, entity: AlertEntity, ticket: Optional[Dict] = None) -> "AlertOutputDTO":
        """
        Args:
            entity: Alerta
            ticket: Resumo do ticket referenciado (número, organização, status)
        """
        return cls(
            id=entity.id,
            ticket_id=entity.ticket_id,
            tipo=entity.tipo.value,
            mensagem=entity.mensagem,
            severidade=entity.severidade.value,
            lido=entity.lido,
            criado_em=entity.criado_em,
            ticket=ticket,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ticketId": self.ticket_id,
            "type": self.tipo,
            "message": self.mensagem,
            "severity": self.severidade,
            "isRead": self.lido,
            "createdAt": self.criado_em.isoformat(),
            "ticket": self.ticket,
        }


@dataclass
class EstatisticasAlertasDTO:
    total: int = 0
    nao_lidos: int = 0
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "unread": self.nao_lidos,
            "critical": self.critical,
            "high": self.high,
            "medium": self.medium,
            "low": self.low,
        }


@dataclass(frozen=True)
class ListarAlertasQueryDTO:
    """
    Filtros da listagem de alertas (sempre mais recentes primeiro).

    Attributes:
        tipo: Tipo do alerta (expiring_soon, expired, renewed, closed)
        apenas_nao_lidos: Mostrar apenas não lidos
        ticket_id: Alertas de um único ticket
        pagina: Número da página (1-indexed)
        por_pagina: Itens por página (default 50)
    """

    tipo: Optional[str] = None
    apenas_nao_lidos: bool = False
    ticket_id: Optional[str] = None
    pagina: int = 1
    por_pagina: int = POR_PAGINA_PADRAO

    def normalizar(self) -> "ListarAlertasQueryDTO":
        """
        Raises:
            ValidationError: Se tipo inválido
        """
        tipo = self.tipo or None
        if tipo is not None:
            try:
                tipo = AlertType(tipo).value
            except ValueError as e:
                raise ValidationError(f"Invalid alert type: {self.tipo}", field="type") from e

        return replace(
            self,
            tipo=tipo,
            pagina=max(1, self.pagina),
            por_pagina=min(max(1, self.por_pagina), POR_PAGINA_MAXIMO),
        )

    @property
    def offset(self) -> int:
        return (self.pagina - 1) * self.por_pagina
