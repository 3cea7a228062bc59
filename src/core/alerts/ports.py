"""
Ports (Interfaces) do Domínio de Alertas.

Escopo por tickets:
    Métodos que recebem `ticket_ids` tratam None como "todos os alertas"
    (visão do administrador) e uma coleção como restrição aos alertas
    desses tickets (visão do contratado). Coleção vazia → nenhum alerta.
"""

from copy import deepcopy
from datetime import datetime
from typing import Collection, Dict, List, Optional, Protocol, Tuple, runtime_checkable

from src.core.shared.exceptions import EntityNotFoundError

from .dtos import EstatisticasAlertasDTO, ListarAlertasQueryDTO
from .entities import AlertEntity, AlertType


@runtime_checkable
class AlertRepository(Protocol):
    """
    Interface para persistência de Alertas.

    Implementações:
    - DjangoAlertRepository (ORM)
    - InMemoryAlertRepository (para testes)
    """

    def add(self, alerta: AlertEntity) -> None:
        """
        Raises:
            StoreError: Se o armazenamento falhar
        """
        ...

    def save(self, alerta: AlertEntity) -> None:
        """Persiste alteração do indicador de leitura."""
        ...

    def get_by_id(self, alert_id: str) -> Optional[AlertEntity]:
        ...

    def delete(self, alert_id: str) -> bool:
        ...

    def delete_by_ticket(self, ticket_id: str) -> int:
        """Remove todos os alertas de um ticket. Retorna quantidade removida."""
        ...

    def exists_recent(self, ticket_id: str, tipo: AlertType, desde: datetime) -> bool:
        """Existe alerta do tipo para o ticket com criado_em >= desde?"""
        ...

    def list_paginated(
        self,
        query: ListarAlertasQueryDTO,
        ticket_ids: Optional[Collection[str]] = None,
    ) -> Tuple[List[AlertEntity], int]:
        """Mais recentes primeiro. Retorna (itens da página, total)."""
        ...

    def mark_all_read(self, ticket_ids: Optional[Collection[str]] = None) -> int:
        """Marca não lidos como lidos. Retorna quantidade alterada."""
        ...

    def stats(self, ticket_ids: Optional[Collection[str]] = None) -> EstatisticasAlertasDTO:
        ...


class InMemoryAlertRepository:
    """
    Implementação em memória do AlertRepository.

    Útil para testes unitários e prototipagem.
    """

    def __init__(self):
        self._alertas: Dict[str, AlertEntity] = {}

    def add(self, alerta: AlertEntity) -> None:
        self._alertas[alerta.id] = deepcopy(alerta)

    def save(self, alerta: AlertEntity) -> None:
        if alerta.id not in self._alertas:
            raise EntityNotFoundError("Alert not found", entity_type="Alert", entity_id=alerta.id)
        self._alertas[alerta.id] = deepcopy(alerta)

    def get_by_id(self, alert_id: str) -> Optional[AlertEntity]:
        alerta = self._alertas.get(alert_id)
        return deepcopy(alerta) if alerta else None

    def delete(self, alert_id: str) -> bool:
        return self._alertas.pop(alert_id, None) is not None

    def delete_by_ticket(self, ticket_id: str) -> int:
        ids = [a.id for a in self._alertas.values() if a.ticket_id == ticket_id]
        for alert_id in ids:
            del self._alertas[alert_id]
        return len(ids)

    def exists_recent(self, ticket_id: str, tipo: AlertType, desde: datetime) -> bool:
        return any(
            a.ticket_id == ticket_id and a.tipo == tipo and a.criado_em >= desde
            for a in self._alertas.values()
        )

    def list_paginated(
        self,
        query: ListarAlertasQueryDTO,
        ticket_ids: Optional[Collection[str]] = None,
    ) -> Tuple[List[AlertEntity], int]:
        alertas = self._escopo(ticket_ids)

        if query.tipo:
            alertas = [a for a in alertas if a.tipo.value == query.tipo]
        if query.apenas_nao_lidos:
            alertas = [a for a in alertas if not a.lido]
        if query.ticket_id:
            alertas = [a for a in alertas if a.ticket_id == query.ticket_id]

        alertas.sort(key=lambda a: a.criado_em, reverse=True)

        total = len(alertas)
        pagina = alertas[query.offset:query.offset + query.por_pagina]
        return [deepcopy(a) for a in pagina], total

    def mark_all_read(self, ticket_ids: Optional[Collection[str]] = None) -> int:
        alterados = 0
        for alerta in self._escopo(ticket_ids):
            if not alerta.lido:
                alerta.lido = True
                alterados += 1
        return alterados

    def stats(self, ticket_ids: Optional[Collection[str]] = None) -> EstatisticasAlertasDTO:
        alertas = self._escopo(ticket_ids)
        resultado = EstatisticasAlertasDTO(
            total=len(alertas),
            nao_lidos=len([a for a in alertas if not a.lido]),
        )
        for alerta in alertas:
            nome = alerta.severidade.value
            setattr(resultado, nome, getattr(resultado, nome) + 1)
        return resultado

    def _escopo(self, ticket_ids: Optional[Collection[str]]) -> List[AlertEntity]:
        if ticket_ids is None:
            return list(self._alertas.values())
        ids = set(ticket_ids)
        return [a for a in self._alertas.values() if a.ticket_id in ids]

    def list_all(self) -> List[AlertEntity]:
        return [deepcopy(a) for a in self._alertas.values()]

    def clear(self) -> None:
        self._alertas.clear()
