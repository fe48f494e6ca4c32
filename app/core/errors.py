# app/core/errors.py
"""
Domain errors raised by services.

All of them are HTTPException subclasses so FastAPI renders them directly;
services raise them, routers never translate.
"""
import uuid

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    def __init__(self, entity: str, detail: str | None = None):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail or f"{entity} not found",
        )
        self.entity = entity


class InsufficientStockError(HTTPException):
    """Requested quantity exceeds what is currently on hand."""

    def __init__(
        self,
        product_id: uuid.UUID,
        product_name: str,
        requested: int,
        available: int,
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "message": f"Insufficient stock for product: {product_name}",
                "product_id": str(product_id),
                "product_name": product_name,
                "requested": requested,
                "available": available,
            },
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class InvalidStateTransitionError(HTTPException):
    def __init__(self, current: str, target: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid status transition: {current} -> {target}",
        )
        self.current = current
        self.target = target


class AccessDeniedError(HTTPException):
    def __init__(self, detail: str = "Access denied"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
        )


class ConflictError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
        )
