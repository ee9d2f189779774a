class ScanRoiError(Exception):
    """Base class for every error raised by the ROI engine."""


class InvalidInputError(ScanRoiError, ValueError):
    """A parameter is out of range or would be used as a zero divisor."""

    def __init__(self, field, message):
        self.field = field
        super().__init__(f"{field}: {message}")


class UnknownScannerModelError(ScanRoiError, KeyError):
    def __init__(self, model, known):
        self.model = model
        self.known = tuple(known)
        super().__init__(f"Unknown scanner model {model!r}; expected one of {', '.join(self.known)}")

    def __str__(self):
        # KeyError would otherwise repr() the message
        return self.args[0]


class ConfigurationError(ScanRoiError):
    """An assumptions override file could not be read or holds bad values."""
