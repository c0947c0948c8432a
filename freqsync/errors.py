# freqsync/errors.py


class FrequencySyncError(ValueError):
    """Base class for synchronization failures."""


class EmptyInputError(FrequencySyncError):
    """Stream has no samples where at least one is required."""


class InvalidParameterError(FrequencySyncError):
    """Sample rate, modulation order or loop gain out of range."""


class NumericalDegenerateError(FrequencySyncError):
    """Magnitude spectrum is all zero, so there is no peak to pick."""
