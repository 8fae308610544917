"""
Error types raised by the extraction core and the catalog store adapters.

Fields that simply cannot be found are not errors; they are left out of the
result and lower the confidence score instead.
"""


class CatalogError(ValueError):
    """Base class for all errors surfaced to the caller."""


class StructuralParseError(CatalogError):
    """A required root element is missing from the pasted HTML."""

    def __init__(self, message: str, fragment: str = ""):
        super().__init__(message)
        self.fragment = fragment


class CatalogStoreError(CatalogError):
    """The catalog store rejected or failed a request."""

    def __init__(self, message: str, table: str = "", status_code: int = 0):
        super().__init__(message)
        self.table = table
        self.status_code = status_code
