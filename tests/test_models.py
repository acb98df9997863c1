import pytest
from pydantic import ValidationError

from readerspec.parser.base import (
    Field,
    Filter,
    HumanReadableSection,
    Pagination,
    ParsedDocument,
    ResourceDescription,
)

TODOS = {
    "resource": "todos",
    "fields": [{"name": "id", "type": "string"}],
    "filters": [{"field": "q", "op": "search", "target": "title"}],
    "sort": [{"field": "id", "dir": ["ascending"]}],
    "paginate": {"maxPer": 100, "defaultPer": 10, "startPage": 1},
    "ownership": {"by": "user"},
    "returns": ["id"],
}


class TestField:
    def test_optional_attributes_default_to_none(self):
        f = Field(name="id", type="string")
        assert f.desc is None
        assert f.relation is None

    def test_rejects_unknown_type(self):
        with pytest.raises(ValidationError):
            Field(name="id", type="datetime")


class TestFilter:
    def test_values_filter(self):
        f = Filter(field="status", op="in", values=["open", "done"])
        assert f.values == ["open", "done"]
        assert f.target is None

    def test_rejects_unknown_op(self):
        with pytest.raises(ValidationError):
            Filter(field="status", op="like")


class TestPagination:
    def test_reads_camel_case_keys(self):
        p = Pagination.model_validate({"maxPer": 50, "defaultPer": 5, "startPage": 1})
        assert p.max_per == 50
        assert p.default_per == 5

    def test_accepts_snake_case_names(self):
        p = Pagination(max_per=50, default_per=5, start_page=1)
        assert p.model_dump(by_alias=True) == {"maxPer": 50, "defaultPer": 5, "startPage": 1}

    def test_keeps_integers(self):
        p = Pagination.model_validate({"maxPer": 50, "defaultPer": 5, "startPage": 1})
        assert isinstance(p.max_per, int)


class TestResourceDescription:
    def test_from_block_data(self):
        rd = ResourceDescription.model_validate(TODOS)
        assert rd.resource == "todos"
        assert rd.fields[0].name == "id"
        assert rd.filters[0].op == "search"
        assert rd.paginate.start_page == 1
        assert rd.ownership.by == "user"

    def test_serialization_roundtrip(self):
        rd = ResourceDescription.model_validate(TODOS)
        data = rd.model_dump(by_alias=True, exclude_none=True)
        assert data == TODOS
        assert ResourceDescription.model_validate(data) == rd


class TestSectionModels:
    def test_section_content_defaults_empty(self):
        s = HumanReadableSection(type="what", title="What")
        assert s.content == ""

    def test_parsed_document_defaults(self):
        doc = ParsedDocument(content="text")
        assert doc.resource_description is None
        assert doc.errors == []
