"""Translate a document's prose into its readerspec block and save it."""

import logging
from pathlib import Path

from pydantic import BaseModel

from readerspec.config import DOCUMENT_EXTENSION
from readerspec.errors import DocumentIOError, StructuralParseError
from readerspec.llm import LlmClient, TranslationResult
from readerspec.logging_utils import timed
from readerspec.parser.document import fence_block, parse_block
from readerspec.parser.sections import CLOSE_FENCE, OPEN_MARKER, is_open_marker, split_sections
from readerspec.prompt import format_sections_for_prompt
from readerspec.storage import list_documents, read_document, write_document

NO_SECTIONS_ERROR = "No human-readable sections found in the file"


class BatchSummary(BaseModel):
    results: dict[str, TranslationResult] = {}

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results.values() if r.success)

    @property
    def failure_count(self) -> int:
        return len(self.results) - self.success_count


def find_open_marker(content: str) -> int | None:
    """Offset of the first opening marker that starts a line, if any."""
    offset = 0
    for line in content.split("\n"):
        if is_open_marker(line):
            return offset + line.index(OPEN_MARKER)
        offset += len(line) + 1
    return None


def update_document(content: str, block: str) -> str:
    """Return ``content`` with its readerspec block replaced by ``block``.

    An unterminated block is replaced from its opening marker to the end.
    Without any block, a fenced one is appended after a blank line.
    """
    start = find_open_marker(content)
    if split_sections(content).has_block:
        end = content.rindex(CLOSE_FENCE) + len(CLOSE_FENCE)
        return content[:start] + fence_block(block) + content[end:]
    if start is not None:
        return content[:start] + fence_block(block) + "\n"
    return content.rstrip("\n") + "\n\n" + fence_block(block) + "\n"


class TranslationService:
    """Runs split -> prompt -> completion -> rewrite for one document at a time."""

    def __init__(
        self,
        client: LlmClient | None = None,
        extension: str = DOCUMENT_EXTENSION,
        logger: logging.Logger | None = None,
    ):
        self.client = client or LlmClient()
        self.extension = extension
        self.logger = logger or logging.getLogger(__name__)

    def translate_file(self, path: Path | str) -> TranslationResult:
        try:
            document = read_document(path, self.extension)
        except DocumentIOError as e:
            return TranslationResult(success=False, error=str(e))
        return self._translate_content(document.content)

    def _translate_content(self, content: str) -> TranslationResult:
        sections = split_sections(content).sections
        if not sections:
            return TranslationResult(success=False, error=NO_SECTIONS_ERROR)

        prompt = format_sections_for_prompt(sections)
        with timed("completion request", self.logger):
            result = self.client.translate(prompt)

        if result.success:
            # The client is not trusted to have checked its own output.
            try:
                parse_block(result.block or "")
            except StructuralParseError as e:
                return TranslationResult(success=False, error=f"Generated JSON failed validation: {e}")
        return result

    def translate_and_update(self, path: Path | str) -> TranslationResult:
        """Translate a document and write the new block back into it."""
        path = Path(path)
        try:
            document = read_document(path, self.extension)
        except DocumentIOError as e:
            return TranslationResult(success=False, error=str(e))

        result = self._translate_content(document.content)
        if not result.success:
            return result

        if not split_sections(document.content).has_block and find_open_marker(document.content) is not None:
            self.logger.warning("%s has an unterminated readerspec block; replacing it", path)
        new_content = update_document(document.content, result.block)
        try:
            write_document(path, new_content)
        except DocumentIOError as e:
            self.logger.error("Error updating %s: %s", path, e)
            return TranslationResult(success=False, error=f"Failed to update file with generated JSON: {e}")

        self.logger.info("Updated readerspec block in %s", path)
        return result

    def translate_all(self, root: Path | str) -> BatchSummary:
        """Translate every document under ``root``; one failure never stops the batch."""
        summary = BatchSummary()
        for path in list_documents(root, self.extension):
            self.logger.info("Processing %s", path)
            result = self.translate_and_update(path)
            if result.success:
                self.logger.info("Translated %s", path)
            else:
                self.logger.error("Failed %s: %s", path, result.error)
            summary.results[str(path)] = result
        return summary
