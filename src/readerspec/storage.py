"""Reading, writing and discovering .readerspec.md documents."""

import logging
import os
from pathlib import Path

from pydantic import BaseModel

from readerspec.config import DOCUMENT_EXTENSION
from readerspec.errors import DocumentIOError, DocumentNotFoundError

logger = logging.getLogger(__name__)


class SpecDocument(BaseModel):
    path: Path
    content: str
    name: str


def document_name(path: Path, extension: str = DOCUMENT_EXTENSION) -> str:
    """File name without the document extension (``todos.readerspec.md`` -> ``todos``)."""
    name = path.name
    if name.endswith(extension):
        return name[: -len(extension)]
    return path.stem


def read_document(path: Path | str, extension: str = DOCUMENT_EXTENSION) -> SpecDocument:
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise DocumentNotFoundError(f"File not found: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentIOError(f"Error reading file {path}: {e}") from e
    return SpecDocument(path=path, content=content, name=document_name(path, extension))


def write_document(path: Path | str, content: str) -> None:
    """Replace a document's content in one step.

    The new text goes to a temporary sibling first and is renamed over the
    original, so readers never see a half-written document.
    """
    path = Path(path)
    tmp_path = path.with_name(f".{path.name}.tmp.{os.getpid()}")
    try:
        with open(tmp_path, "w", encoding="utf-8") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    except OSError as e:
        raise DocumentIOError(f"Error writing file {path}: {e}") from e
    finally:
        if tmp_path.exists():
            tmp_path.unlink()
    logger.debug("Wrote %s (%d chars)", path, len(content))


def list_documents(root: Path | str, extension: str = DOCUMENT_EXTENSION) -> list[Path]:
    """Find every document under ``root``, recursively, in sorted order."""
    root = Path(root)
    if not root.is_dir():
        raise DocumentNotFoundError(f"Specs directory not found: {root}")
    return sorted(p for p in root.rglob(f"*{extension}") if p.is_file())


def read_all_documents(root: Path | str, extension: str = DOCUMENT_EXTENSION) -> list[SpecDocument]:
    return [read_document(p, extension) for p in list_documents(root, extension)]
