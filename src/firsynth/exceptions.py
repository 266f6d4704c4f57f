"""Exceptions raised by the coefficient designers and the decimation planner."""


class FilterDesignError(ValueError):
    """Base exception for filter design errors."""

    pass


class InvalidSpecification(FilterDesignError):
    """Raised when a filter or decimation request is inconsistent.

    This occurs when:
    - pass frequency is not below the stop frequency
    - stop frequency exceeds half the sample rate
    - a rate, length or attenuation is not positive
    - a window name is unknown
    """

    pass


class NonIntegerDecimation(FilterDesignError):
    """Raised when the sample rate is not an integer multiple of the decimated rate."""

    pass
