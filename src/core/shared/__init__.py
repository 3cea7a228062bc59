"""
Shared Domain Components.

Contém componentes compartilhados entre todos os domínios:
- Exceções de domínio
- Interfaces (Ports)
- Base classes para Domain Events
- Relógio UTC injetável
"""

from .exceptions import (
    DomainException,
    ValidationError,
    EntityNotFoundError,
    ForbiddenError,
    InvalidAssigneeError,
    ConflictError,
    ConcurrencyError,
    StoreError,
    BusinessRuleViolationError,
)
from .events import DomainEvent
from .interfaces import UnitOfWork, EventPublisher
from .clock import utc_agora

__all__ = [
    "DomainException",
    "ValidationError",
    "EntityNotFoundError",
    "ForbiddenError",
    "InvalidAssigneeError",
    "ConflictError",
    "ConcurrencyError",
    "StoreError",
    "BusinessRuleViolationError",
    "DomainEvent",
    "UnitOfWork",
    "EventPublisher",
    "utc_agora",
]
