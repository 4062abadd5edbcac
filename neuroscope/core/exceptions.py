"""
Exceptions raised by the NeuroScope engine

Every exception carries a message that can be shown to the user as-is.
They are raised before any result is produced, so a caller that catches
one still holds its previous (unfiltered or previously filtered) data.
"""

UNSTABLE_FILTER_MESSAGE = "Filter produced unstable output, try a lower order or different cutoff"


class NeuroScopeError(Exception):
    """Base class for engine errors"""


class FilterValidationError(NeuroScopeError, ValueError):
    """Filter parameters rejected before any signal processing ran"""


class FilterInstabilityError(NeuroScopeError, RuntimeError):
    """Filtered output contained NaN or infinite values and was discarded"""

    def __init__(self, message: str = UNSTABLE_FILTER_MESSAGE):
        super().__init__(message)
