class InvalidAmount(ValueError):
    """Raised when an XP total, XP amount or level is outside its domain."""

    def __init__(self, value, reason: str = "must be a non-negative integer"):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid XP amount {value!r}: {reason}")


class InvalidRange(ValueError):
    """Raised when a history range selector is not one of the known values."""

    def __init__(self, value, allowed):
        self.value = value
        self.allowed = list(allowed)
        super().__init__(
            f"Invalid range {value!r}. Expected one of: {', '.join(self.allowed)}"
        )
