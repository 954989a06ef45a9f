"""
Domain errors raised by the inventory services.

The HTTP layer maps each one to a status code (see tricol.app.core.errors);
services never raise HTTPException themselves.
"""

from __future__ import annotations

from typing import Any


class TricolError(Exception):
    """Base exception for all domain errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFound(TricolError):
    """Lookup by id failed."""

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(
            f"{entity} not found: {entity_id}",
            code=f"{entity.upper()}_NOT_FOUND",
            details={"entity": entity, "id": entity_id},
        )
        self.entity = entity
        self.entity_id = entity_id


class InsufficientStock(TricolError):
    """Delivery would drive a product's on-hand quantity below zero."""

    def __init__(self, product_id: int, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for product {product_id} "
            f"(requested={requested}, available={available})",
            code="INSUFFICIENT_STOCK",
            details={
                "product_id": product_id,
                "requested": requested,
                "available": available,
                "shortfall": requested - available,
            },
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available

    @property
    def shortfall(self) -> int:
        return self.requested - self.available


class InvalidInput(TricolError):
    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message,
            code="INVALID_INPUT",
            details={"field": field} if field else None,
        )
        self.field = field


class Conflict(TricolError):
    """Operation clashes with existing state (duplicate key, row still referenced)."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, code="CONFLICT", details=details)
