"""
Shared Domain Components.

Contém componentes compartilhados entre os domínios:
- Exceções de domínio
- Interfaces (Ports)
- Base class para Domain Events
"""

from .exceptions import (
    DomainException,
    ValidationError,
    EntityNotFoundError,
    NotFoundError,
    BusinessRuleViolationError,
    InvalidTransitionError,
    PersistenceError,
    NotificationDispatchError,
)
from .events import DomainEvent
from .interfaces import UnitOfWork, EventPublisher

__all__ = [
    "DomainException",
    "ValidationError",
    "EntityNotFoundError",
    "NotFoundError",
    "BusinessRuleViolationError",
    "InvalidTransitionError",
    "PersistenceError",
    "NotificationDispatchError",
    "DomainEvent",
    "UnitOfWork",
    "EventPublisher",
]
