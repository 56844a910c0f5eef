"""
Errors raised by the polar computation.

The core never encodes failures in return values. It raises one of these
and lets the HTTP layer decide on a status code. None of them are worth
retrying: the computation is deterministic, so the same input fails the
same way every time.
"""


class PolarError(Exception):
    """Base class for all polar computation failures."""
    pass


class InvalidRequest(PolarError):
    """Raised when the caller's wind speed or boat identity is out of contract."""
    pass


class MalformedPayload(PolarError):
    """
    Raised when no usable polar model can be built from an upstream payload.

    Either the wind-step axis is unusable or not a single speed series
    survived normalization.
    """
    pass


class AxisMismatch(PolarError):
    """Raised when a series is not aligned with the wind-step axis."""
    pass


class InsufficientPolarData(PolarError):
    """Raised when neither upwind nor downwind optimum could be determined."""
    pass
