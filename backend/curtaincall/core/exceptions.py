"""
Domain errors raised by the service layer

Services raise ``ValueError`` for invalid input and return ``None``/``False``
for missing records; the subclasses below let routers pick a better status.
"""


class BookingConflictError(ValueError):
    """Requested seats or booking state clash with existing data (HTTP 409)"""


class BookingUnavailableError(ValueError):
    """Show cannot be booked right now (not active or no future performance)"""


class InvalidDiscountError(ValueError):
    """Discount code does not exist or can no longer be redeemed"""


class InvalidCredentialsError(ValueError):
    """Login or one-time code check failed (HTTP 401)"""
