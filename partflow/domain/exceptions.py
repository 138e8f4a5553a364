class DomainValidationError(ValueError):
    """A required field is missing or carries an impossible value."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
