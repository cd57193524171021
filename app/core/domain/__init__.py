"""
Domain Layer - Core DDD building blocks

This module provides base classes shared by the domain packages:
- Entities: Objects with identity and lifecycle
- Value Objects: Immutable objects compared by value
- Exceptions: Domain-specific error handling
"""

from app.core.domain.entities import (
    AggregateRoot,
    Entity,
    SoftDeletableEntity,
    utc_now,
)
from app.core.domain.exceptions import (
    AuthorizationException,
    BusinessRuleViolationException,
    DomainException,
    DuplicateEntityException,
    EntityNotFoundException,
    InsufficientStockException,
    InvalidOperationException,
    PaymentException,
    ValidationException,
)
from app.core.domain.value_objects import (
    Money,
    StatusEnum,
    ValueObject,
    quantize_money,
    to_decimal,
)

__all__ = [
    # Entities
    "Entity",
    "AggregateRoot",
    "SoftDeletableEntity",
    "utc_now",
    # Value Objects
    "ValueObject",
    "Money",
    "StatusEnum",
    "quantize_money",
    "to_decimal",
    # Exceptions
    "DomainException",
    "ValidationException",
    "EntityNotFoundException",
    "BusinessRuleViolationException",
    "InsufficientStockException",
    "InvalidOperationException",
    "AuthorizationException",
    "DuplicateEntityException",
    "PaymentException",
]
