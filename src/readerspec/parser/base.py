"""Data models for readerspec documents.

The splitter and parser turn a ``.readerspec.md`` document into these
models; the validator decides when a raw block may become a
``ResourceDescription``.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

SectionType = Literal["what", "how", "returns", "example", "belongs", "notes", "combine"]
FieldType = Literal["string", "boolean", "number", "array"]
FilterOp = Literal["equals", "search", "contains", "in", "range"]


class _BlockModel(BaseModel):
    """Base for models serialized inside a readerspec block (camelCase keys)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Field(_BlockModel):
    """A single attribute of a resource."""

    name: str
    type: FieldType
    desc: str | None = None
    relation: str | None = None


class Filter(_BlockModel):
    """A query filter exposed by the resource listing."""

    field: str
    op: FilterOp
    values: list[str] | None = None  # equals / in / range
    target: str | None = None  # search / contains


class SortOption(_BlockModel):
    field: str
    dir: list[str]


class Pagination(_BlockModel):
    max_per: int | float
    default_per: int | float
    start_page: int | float


class Ownership(_BlockModel):
    by: str


class ResourceDescription(_BlockModel):
    """The validated description of one API resource."""

    resource: str
    fields: list[Field]
    filters: list[Filter]
    sort: list[SortOption]
    paginate: Pagination
    ownership: Ownership
    returns: list[str]


class HumanReadableSection(BaseModel):
    """A ``## `` heading and the prose lines beneath it."""

    type: SectionType
    title: str
    content: str = ""


class SplitResult(BaseModel):
    """Sections and raw block text found by the splitter."""

    sections: list[HumanReadableSection]
    block: str | None = None
    has_block: bool = False


class ParsedDocument(BaseModel):
    """Outcome of extracting and decoding the embedded block.

    ``resource_description`` holds the decoded block as-is (not yet
    validated) and is ``None`` whenever ``errors`` is non-empty.
    """

    content: str
    resource_description: Any = None
    errors: list[str] = []
