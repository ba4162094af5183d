from __future__ import annotations


class ChartGeneratorError(Exception):
    """Base class for errors surfaced to the user as a single error message."""


class ParseError(ChartGeneratorError, ValueError):
    pass


class WrongExtensionError(ParseError):
    def __init__(self, filename: str) -> None:
        super().__init__(f"Please upload a valid CSV file (got '{filename}').")
        self.filename = filename


class MalformedCsvError(ParseError):
    def __init__(self, message: str, row: int | None = None) -> None:
        where = f" (row {row})" if row is not None else ""
        super().__init__(f"Error parsing CSV file{where}: {message}")
        self.reason = message
        self.row = row


class InvalidBindingError(ChartGeneratorError, KeyError):
    def __init__(self, field: str, header: str) -> None:
        super().__init__(f"Column '{header}' is not in the current dataset.")
        self.field = field
        self.header = header

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class ExportError(ChartGeneratorError, RuntimeError):
    pass


class NoSurfaceError(ExportError):
    def __init__(self, message: str = "Nothing to export: load a CSV file first.") -> None:
        super().__init__(message)
