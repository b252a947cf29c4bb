class MemoryBankError(Exception):
    """Base class for storage and session failures."""


class MemoryBankNotInitializedError(MemoryBankError):
    """Raised when an operation needs a memory bank location that is not set."""


class DocumentNotFoundError(MemoryBankError):
    """Raised when a document file or memory bank directory is missing."""


class RulesNotFoundError(MemoryBankError):
    """Raised when the rules file is absent from a memory bank directory."""


class UnsupportedExportFormatError(MemoryBankError):
    """Raised for export formats other than ``folder`` and ``json``."""
