"""Readerspec block extraction.

Finds the first ```readerspec fenced block in a document and decodes it
as JSON. Nothing here raises for bad input except ``parse_block``.
"""

import json
import re
from typing import Any, Iterable

from readerspec.errors import StructuralParseError
from readerspec.parser.base import ParsedDocument, ResourceDescription
from readerspec.parser.sections import CLOSE_FENCE, OPEN_MARKER

BLOCK_PATTERN = re.compile(
    r"^[ \t]*" + re.escape(OPEN_MARKER) + r"[^\n]*\n(.*?)^[ \t]*" + re.escape(CLOSE_FENCE) + r"[ \t\r]*$",
    re.MULTILINE | re.DOTALL,
)

NO_BLOCK_ERROR = "No ```readerspec block found"


def find_block(text: str) -> str | None:
    """Return the raw text of the first complete readerspec block, if any."""
    match = BLOCK_PATTERN.search(text)
    if not match:
        return None
    return match.group(1).strip()


def _reject_constant(name: str):
    raise ValueError(f"{name} is not a valid JSON value")


def decode_json(text: str) -> Any:
    """Strict ``json.loads``: NaN and Infinity raise ValueError."""
    return json.loads(text, parse_constant=_reject_constant)


def parse_block(block: str) -> Any:
    """Decode block text as JSON, raising StructuralParseError on failure."""
    try:
        return decode_json(block)
    except ValueError as e:
        raise StructuralParseError(f"JSON parse error: {e}") from e


def parse_document(text: str) -> ParsedDocument:
    """Extract and decode the embedded block of a document."""
    block = find_block(text)
    if block is None:
        return ParsedDocument(content=text, errors=[NO_BLOCK_ERROR])

    try:
        data = parse_block(block)
    except StructuralParseError as e:
        return ParsedDocument(content=text, errors=[str(e)])

    return ParsedDocument(content=text, resource_description=data)


def extract_all(documents: Iterable[str]) -> list[tuple[str, ParsedDocument]]:
    """Parse several document texts, keeping their order."""
    return [(text, parse_document(text)) for text in documents]


def render_block(description: ResourceDescription) -> str:
    """Serialize a resource description as block JSON (camelCase keys)."""
    return description.model_dump_json(indent=2, by_alias=True, exclude_none=True)


def fence_block(block: str) -> str:
    return f"{OPEN_MARKER}\n{block}\n{CLOSE_FENCE}"
