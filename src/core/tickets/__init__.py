"""
Domínio de Tickets - Tickets de localização com prazo de validade.

Este módulo contém toda a lógica de negócio relacionada a tickets,
incluindo:
- Entidades (TicketEntity, TicketStatus, Renovacao)
- Use Cases (CriarTicket, RenovarTicket, FecharTicket, ListarTickets...)
- Domain Events (TicketCriado, TicketRenovado, TicketFechado...)
- DTOs (Input/Output Data Transfer Objects)
- Ports (Interfaces para repositórios)

Características do Domínio:
- Numeração TKT-<ano>-NNNN gerada automaticamente
- Renovação estende a partir da expiração atual
- Transições de status controladas (fechado é terminal)
- Concorrência otimista por versão
"""

from .entities import TicketEntity, TicketStatus, Renovacao, gerar_numero_ticket
from .events import (
    TicketCriadoEvent,
    TicketAtualizadoEvent,
    TicketRenovadoEvent,
    TicketFechadoEvent,
    TicketExpiradoEvent,
    TicketExcluidoEvent,
)
from .dtos import (
    CriarTicketInputDTO,
    AtualizarTicketInputDTO,
    TicketOutputDTO,
    ListarTicketsQueryDTO,
    PaginatedResultDTO,
    EstatisticasTicketsDTO,
)
from .ports import TicketRepository, InMemoryTicketRepository
from .use_cases import (
    CriarTicketService,
    AtualizarTicketService,
    RenovarTicketService,
    FecharTicketService,
    ExcluirTicketService,
    ObterTicketService,
    ListarTicketsService,
    EstatisticasTicketsService,
    GerarNumeroTicketService,
    VerificarNumeroTicketService,
)

__all__ = [
    # Entities
    "TicketEntity",
    "TicketStatus",
    "Renovacao",
    "gerar_numero_ticket",
    # Events
    "TicketCriadoEvent",
    "TicketAtualizadoEvent",
    "TicketRenovadoEvent",
    "TicketFechadoEvent",
    "TicketExpiradoEvent",
    "TicketExcluidoEvent",
    # DTOs
    "CriarTicketInputDTO",
    "AtualizarTicketInputDTO",
    "TicketOutputDTO",
    "ListarTicketsQueryDTO",
    "PaginatedResultDTO",
    "EstatisticasTicketsDTO",
    # Ports
    "TicketRepository",
    "InMemoryTicketRepository",
    # Use Cases
    "CriarTicketService",
    "AtualizarTicketService",
    "RenovarTicketService",
    "FecharTicketService",
    "ExcluirTicketService",
    "ObterTicketService",
    "ListarTicketsService",
    "EstatisticasTicketsService",
    "GerarNumeroTicketService",
    "VerificarNumeroTicketService",
]
