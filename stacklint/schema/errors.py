"""Schema catalog exceptions."""


class SchemaLoadError(Exception):
    """Raised when a schema catalog cannot be read or parsed."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)


class SchemaValidationError(Exception):
    """Raised when a catalog entry does not describe a valid schema."""

    def __init__(self, message: str, errors: list[dict] | None = None):
        self.errors = errors or []
        super().__init__(message)
