"""Batch parse-and-validate over a specs directory.

Every document gets an outcome; a bad document never stops the batch.
Generators receive ``CheckReport.resources()``, which only contains
descriptions that passed validation.
"""

import logging
from pathlib import Path

from pydantic import BaseModel

from readerspec.config import DOCUMENT_EXTENSION
from readerspec.errors import DocumentIOError, ValidationError
from readerspec.logging_utils import timed
from readerspec.parser.base import ResourceDescription
from readerspec.parser.document import parse_document
from readerspec.storage import SpecDocument, document_name, list_documents, read_document
from readerspec.validator import to_resource, validate_resource

logger = logging.getLogger(__name__)


class DocumentOutcome(BaseModel):
    path: Path
    name: str
    errors: list[str] = []
    warnings: list[str] = []
    suggestions: list[str] = []
    resource: ResourceDescription | None = None

    @property
    def is_valid(self) -> bool:
        return not self.errors and self.resource is not None


class CheckReport(BaseModel):
    outcomes: list[DocumentOutcome] = []

    @property
    def valid_count(self) -> int:
        return sum(1 for o in self.outcomes if o.is_valid)

    @property
    def invalid_count(self) -> int:
        return len(self.outcomes) - self.valid_count

    @property
    def total_errors(self) -> int:
        return sum(len(o.errors) for o in self.outcomes)

    @property
    def ok(self) -> bool:
        return self.invalid_count == 0

    def resources(self) -> list[ResourceDescription]:
        return [o.resource for o in self.outcomes if o.is_valid]


def check_document(document: SpecDocument) -> DocumentOutcome:
    outcome = DocumentOutcome(path=document.path, name=document.name)

    parsed = parse_document(document.content)
    if parsed.errors:
        outcome.errors = list(parsed.errors)
        return outcome

    result = validate_resource(parsed.resource_description)
    outcome.errors = result.errors
    outcome.warnings = result.warnings
    outcome.suggestions = result.suggestions
    if result.is_valid:
        try:
            outcome.resource = to_resource(parsed.resource_description)
        except ValidationError as e:
            outcome.errors = e.errors
    return outcome


def check_documents(root: Path | str, extension: str = DOCUMENT_EXTENSION) -> CheckReport:
    """Check every document under ``root``."""
    with timed("check", logger):
        paths = list_documents(root, extension)
        logger.debug("Found %d document(s) in %s", len(paths), root)

        report = CheckReport()
        for path in paths:
            try:
                document = read_document(path, extension)
            except DocumentIOError as e:
                report.outcomes.append(
                    DocumentOutcome(path=path, name=document_name(path, extension), errors=[str(e)])
                )
                continue
            outcome = check_document(document)
            if outcome.is_valid:
                logger.debug("%s is valid", document.name)
            else:
                logger.debug("%s has %d error(s)", document.name, len(outcome.errors))
            report.outcomes.append(outcome)
    return report
