# Filename: rutz/errors.py
# Domain errors raised below the route layer. Not-found is never an error:
# storage returns None/False for it.


class InvariantViolation(ValueError):
    """A mutation would break a checked invariant (stock, funding)."""


class CheckoutError(ValueError):
    """The session cart cannot be turned into an order."""
