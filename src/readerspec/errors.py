"""Exception types raised by readerspec collaborators."""


class ReaderSpecError(Exception):
    """Base class for readerspec errors."""


class StructuralParseError(ReaderSpecError):
    """The readerspec block is missing or is not valid JSON."""


class ValidationError(ReaderSpecError):
    """A resource description broke one or more schema rules."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__(f"{len(self.errors)} validation error(s): " + "; ".join(self.errors))


class CompletionServiceError(ReaderSpecError):
    """The completion service failed or returned nothing usable."""


class DocumentIOError(ReaderSpecError):
    """Reading, writing or listing documents failed."""


class DocumentNotFoundError(DocumentIOError):
    """A document or specs directory does not exist."""
