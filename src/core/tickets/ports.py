"""
Ports (Interfaces) do Domínio de Tickets.

Define os contratos que os Adapters de infraestrutura devem implementar
para persistência e consulta de tickets.

Princípio:
    Core define interfaces → Adapters implementam
    Dependências sempre apontam para o Core

Concorrência:
    Toda escrita de um ticket existente passa por `save()`, que compara
    `versao` com o valor armazenado (lock otimista). O service de comando
    e o monitor de expiração usam o mesmo mecanismo.
"""

from copy import deepcopy
from datetime import datetime
from typing import Dict, List, Optional, Protocol, Tuple, runtime_checkable

from src.core.shared.exceptions import (
    ConcurrencyError,
    ConflictError,
    EntityNotFoundError,
)

from .dtos import ListarTicketsQueryDTO
from .entities import TicketEntity, TicketStatus


@runtime_checkable
class TicketRepository(Protocol):
    """
    Interface para persistência de Tickets.

    Implementações:
    - DjangoTicketRepository (PostgreSQL/SQLite via ORM)
    - InMemoryTicketRepository (para testes)
    """

    def add(self, ticket: TicketEntity) -> None:
        """
        Insere novo ticket.

        Raises:
            ConflictError: Se o número do ticket já existe
            StoreError: Se o armazenamento falhar
        """
        ...

    def save(self, ticket: TicketEntity) -> None:
        """
        Atualiza ticket existente com lock otimista.

        Em caso de sucesso `ticket.versao` é incrementada.

        Raises:
            ConcurrencyError: Se a versão armazenada difere de ticket.versao
            EntityNotFoundError: Se o ticket não existe mais
            StoreError: Se o armazenamento falhar
        """
        ...

    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        """Busca ticket por ID. Retorna None se não existir."""
        ...

    def get_by_numero(self, numero: str) -> Optional[TicketEntity]:
        """Busca ticket pelo número (normalizado em maiúsculas)."""
        ...

    def delete(self, ticket_id: str) -> bool:
        """Remove ticket. Retorna False se não existia."""
        ...

    def get_ultimo_numero(self, prefixo: str) -> Optional[str]:
        """
        Maior número (ordem lexicográfica) que começa com `<prefixo>-`.

        Args:
            prefixo: Ex: "TKT-2024"
        """
        ...

    def list_paginated(self, query: ListarTicketsQueryDTO) -> Tuple[List[TicketEntity], int]:
        """
        Lista tickets com filtros, ordenação e paginação.

        Args:
            query: Query já normalizada (ver ListarTicketsQueryDTO.normalizar)

        Returns:
            (itens da página, total sem paginação)
        """
        ...

    def list_ids_by_atribuido(self, atribuido_a_id: str) -> List[str]:
        """IDs dos tickets de um responsável (escopo de alertas)."""
        ...

    def count_by_status(self, atribuido_a_id: Optional[str] = None) -> Dict[TicketStatus, int]:
        """Contagem por status, opcionalmente de um responsável."""
        ...

    def count_expirando(
        self,
        inicio: datetime,
        fim: datetime,
        atribuido_a_id: Optional[str] = None,
    ) -> int:
        """Tickets ABERTOS com inicio < data_expiracao <= fim."""
        ...

    def list_expirando(self, inicio: datetime, fim: datetime) -> List[TicketEntity]:
        """Tickets ABERTOS com inicio < data_expiracao <= fim."""
        ...

    def list_expirados(self, agora: datetime) -> List[TicketEntity]:
        """Tickets ABERTOS com data_expiracao < agora."""
        ...


def _chave_ordenacao(campo: str):
    if campo == "status":
        return lambda t: t.status.value
    return lambda t: getattr(t, campo)


class InMemoryTicketRepository:
    """
    Implementação em memória do TicketRepository.

    Armazena cópias das entidades, de modo que alterações não salvas
    não vazam para o "banco". Útil para testes unitários.

    Example:
        repo = InMemoryTicketRepository()
        repo.add(ticket)
        found = repo.get_by_id(ticket.id)
    """

    def __init__(self):
        self._tickets: Dict[str, TicketEntity] = {}

    def add(self, ticket: TicketEntity) -> None:
        if self.get_by_numero(ticket.numero) is not None:
            raise ConflictError(
                f"Ticket number {ticket.numero} already exists",
                field="ticketNumber",
            )
        ticket.versao = 1
        self._tickets[ticket.id] = deepcopy(ticket)

    def save(self, ticket: TicketEntity) -> None:
        armazenado = self._tickets.get(ticket.id)
        if armazenado is None:
            raise EntityNotFoundError(
                "Ticket not found",
                entity_type="Ticket",
                entity_id=ticket.id,
            )
        if armazenado.versao != ticket.versao:
            raise ConcurrencyError(
                f"Ticket {ticket.numero} was modified concurrently "
                f"(expected version {ticket.versao}, found {armazenado.versao})"
            )
        ticket.versao += 1
        self._tickets[ticket.id] = deepcopy(ticket)

    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        ticket = self._tickets.get(ticket_id)
        return deepcopy(ticket) if ticket else None

    def get_by_numero(self, numero: str) -> Optional[TicketEntity]:
        numero = (numero or "").strip().upper()
        for ticket in self._tickets.values():
            if ticket.numero == numero:
                return deepcopy(ticket)
        return None

    def delete(self, ticket_id: str) -> bool:
        return self._tickets.pop(ticket_id, None) is not None

    def get_ultimo_numero(self, prefixo: str) -> Optional[str]:
        numeros = [t.numero for t in self._tickets.values() if t.numero.startswith(f"{prefixo}-")]
        return max(numeros) if numeros else None

    def list_paginated(self, query: ListarTicketsQueryDTO) -> Tuple[List[TicketEntity], int]:
        tickets = list(self._tickets.values())

        if query.status:
            tickets = [t for t in tickets if t.status.value == query.status]
        if query.organizacao:
            termo = query.organizacao.lower()
            tickets = [t for t in tickets if termo in t.organizacao.lower()]
        if query.numero:
            termo = query.numero.upper()
            tickets = [t for t in tickets if termo in t.numero]
        if query.atribuido_a_id:
            tickets = [t for t in tickets if t.atribuido_a_id == query.atribuido_a_id]

        tickets.sort(key=_chave_ordenacao(query.ordenar_por), reverse=query.ordem == "desc")

        total = len(tickets)
        pagina = tickets[query.offset:query.offset + query.por_pagina]
        return [deepcopy(t) for t in pagina], total

    def list_ids_by_atribuido(self, atribuido_a_id: str) -> List[str]:
        return [t.id for t in self._tickets.values() if t.atribuido_a_id == atribuido_a_id]

    def count_by_status(self, atribuido_a_id: Optional[str] = None) -> Dict[TicketStatus, int]:
        contagem = {status: 0 for status in TicketStatus}
        for ticket in self._escopo(atribuido_a_id):
            contagem[ticket.status] += 1
        return contagem

    def count_expirando(
        self,
        inicio: datetime,
        fim: datetime,
        atribuido_a_id: Optional[str] = None,
    ) -> int:
        return len([
            t for t in self._escopo(atribuido_a_id)
            if t.status == TicketStatus.ABERTO and inicio < t.data_expiracao <= fim
        ])

    def list_expirando(self, inicio: datetime, fim: datetime) -> List[TicketEntity]:
        return [
            deepcopy(t) for t in self._tickets.values()
            if t.status == TicketStatus.ABERTO and inicio < t.data_expiracao <= fim
        ]

    def list_expirados(self, agora: datetime) -> List[TicketEntity]:
        return [
            deepcopy(t) for t in self._tickets.values()
            if t.status == TicketStatus.ABERTO and t.data_expiracao < agora
        ]

    def _escopo(self, atribuido_a_id: Optional[str]) -> List[TicketEntity]:
        if atribuido_a_id is None:
            return list(self._tickets.values())
        return [t for t in self._tickets.values() if t.atribuido_a_id == atribuido_a_id]

    def count(self) -> int:
        return len(self._tickets)

    def clear(self) -> None:
        """Limpa todos os dados (útil para testes)."""
        self._tickets.clear()
