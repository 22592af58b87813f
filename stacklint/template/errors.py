"""Template parsing exceptions."""

from enum import Enum


class ParseErrorKind(str, Enum):
    """Why a template could not be parsed."""

    MALFORMED_SYNTAX = "MalformedSyntax"
    DUPLICATE_KEY = "DuplicateKey"
    UNTERMINATED_BLOCK = "UnterminatedBlock"


class ParseError(Exception):
    """Raised when a template cannot be turned into a node tree.

    Line and column are 1-based when known.
    """

    def __init__(
        self,
        kind: ParseErrorKind,
        message: str,
        line: int | None = None,
        column: int | None = None,
        path: str | None = None,
    ):
        self.kind = kind
        self.line = line
        self.column = column
        self.path = path
        super().__init__(message)

    def __str__(self) -> str:
        location = ""
        if self.path:
            location = self.path
        if self.line is not None:
            location += f":{self.line}" if location else f"line {self.line}"
            if self.column is not None:
                location += f":{self.column}"
        message = super().__str__()
        if location:
            return f"{self.kind.value} at {location}: {message}"
        return f"{self.kind.value}: {message}"


class TemplateLoadError(Exception):
    """Raised when a template file cannot be read."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)
