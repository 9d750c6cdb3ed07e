# backend/utils/errors.py
from fastapi import status
from typing import Optional


# Base class for errors raised by services and mapped to HTTP responses
class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# Malformed or missing input (400)
class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


# Missing resource, or one that belongs to somebody else (404)
class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


# Request is well formed but the current state does not allow it (400)
class StateConflictError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


# Unexpected failure; the message is safe to show to clients
class InternalError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Something went wrong on the server"):
        super().__init__(message)


class InvalidAddressError(ValidationError):
    def __init__(self, message: str = "Delivery address is required and must be at least 5 characters"):
        super().__init__(message)


class EmptyCartError(ValidationError):
    def __init__(self, message: str = "Cart is empty"):
        super().__init__(message)


class EmptyOrderError(ValidationError):
    def __init__(self, message: str = "No items found in this order"):
        super().__init__(message)


class InvalidStatusError(ValidationError):
    def __init__(self, message: str = "Invalid status"):
        super().__init__(message)


class OutOfStockError(StateConflictError):
    def __init__(self, message: str = "This cake is currently out of stock"):
        super().__init__(message)


class InsufficientStockError(StateConflictError):
    """Not enough stock for the requested quantity.

    ``in_cart`` is set when the failure comes from a cart mutation and tells the
    client how many units it already holds.
    """

    def __init__(self, cake_name: str, available: int, in_cart: Optional[int] = None):
        self.cake_name = cake_name
        self.available = available
        self.in_cart = in_cart
        if in_cart is None:
            message = f"Not enough stock for {cake_name}. Only {available} available."
        else:
            message = (
                f"Not enough stock available. Only {available} left "
                f"(you already have {in_cart} in cart)"
            )
        super().__init__(message)


class InvalidTransitionError(StateConflictError):
    def __init__(self, current_status: str):
        self.current_status = current_status
        super().__init__(f"Cannot cancel order with status: {current_status}")
