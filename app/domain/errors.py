# app/domain/errors.py
"""
Typowane bledy domenowe.

Kazdy blad niesie kod, komunikat dla klienta i szczegoly (np. variant_id),
routery tlumacza je na HTTPException po ``status_code``.
"""
from typing import Any, Dict


class DomainError(Exception):
    status_code = 400
    code = "DOMAIN_ERROR"

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details

    def to_detail(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, **self.details}


class ValidationError(DomainError):
    status_code = 400
    code = "VALIDATION_ERROR"


class EmptyCartError(ValidationError):
    code = "EMPTY_CART"

    def __init__(self, message: str = "Cart is empty"):
        super().__init__(message)


class UnsupportedProviderError(ValidationError):
    code = "UNSUPPORTED_PROVIDER"

    def __init__(self, provider: str):
        super().__init__(f"Unsupported payment provider: {provider}", provider=provider)


class NotFoundError(DomainError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity.capitalize()} {entity_id} not found", entity=entity, id=entity_id)


class AddressNotFoundError(NotFoundError):
    code = "ADDRESS_NOT_FOUND"

    def __init__(self, address_id: Any):
        super().__init__("address", address_id)


class ForbiddenError(DomainError):
    status_code = 403
    code = "FORBIDDEN"


class ConflictError(DomainError):
    status_code = 409
    code = "CONFLICT"


class IllegalTransitionError(ConflictError):
    code = "ILLEGAL_TRANSITION"

    def __init__(self, from_status: str, to_status: str):
        super().__init__(
            f"Cannot change order status from {from_status} to {to_status}",
            **{"from": from_status, "to": to_status},
        )
        self.from_status = from_status
        self.to_status = to_status


class OrderNotPendingError(ConflictError):
    code = "ORDER_NOT_PENDING"

    def __init__(self, order_id: int, status: str):
        super().__init__(f"Order {order_id} is {status}, expected PENDING", order_id=order_id, status=status)


class DuplicatePaymentError(ConflictError):
    code = "DUPLICATE_PAYMENT"

    def __init__(self, order_id: int):
        super().__init__(f"A payment already exists for order {order_id}", order_id=order_id)


class ConcurrentModificationError(ConflictError):
    code = "CONCURRENT_MODIFICATION"


class InsufficientStockError(DomainError):
    status_code = 409
    code = "INSUFFICIENT_STOCK"

    def __init__(self, variant_id: int, available: int):
        super().__init__(
            f"Only {available} units available for variant {variant_id}",
            variant_id=variant_id,
            available=available,
        )
        self.variant_id = variant_id
        self.available = available
