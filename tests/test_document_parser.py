import json
from pathlib import Path

import pytest

from readerspec.errors import StructuralParseError
from readerspec.parser.base import ResourceDescription
from readerspec.parser.document import (
    NO_BLOCK_ERROR,
    extract_all,
    fence_block,
    find_block,
    parse_block,
    parse_document,
    render_block,
)
from readerspec.parser.sections import split_sections
from readerspec.validator import validate_resource

FIXTURES = Path(__file__).parent / "fixtures"


class TestParseDocument:
    def test_parse_valid_document(self):
        content = (FIXTURES / "todos.readerspec.md").read_text(encoding="utf-8")
        result = parse_document(content)
        assert result.content == content
        assert result.errors == []
        assert result.resource_description["resource"] == "todos"
        assert len(result.resource_description["fields"]) == 4

    @pytest.mark.parametrize(
        "content",
        [
            "",
            "## What\nGet all todos\n",
            "# API\n\n```json\n{\"resource\": \"todos\"}\n```\n",
        ],
    )
    def test_missing_block(self, content):
        result = parse_document(content)
        assert result.resource_description is None
        assert result.errors == [NO_BLOCK_ERROR]

    def test_unterminated_block_counts_as_missing(self):
        result = parse_document("```readerspec\n{\"resource\": \"todos\"}\n")
        assert result.errors == [NO_BLOCK_ERROR]

    def test_invalid_json(self):
        content = (FIXTURES / "broken.readerspec.md").read_text(encoding="utf-8")
        result = parse_document(content)
        assert result.resource_description is None
        assert len(result.errors) == 1
        assert result.errors[0].startswith("JSON parse error")

    def test_empty_block(self):
        result = parse_document("# API\n\n```readerspec\n\n```\n\nEmpty block.")
        assert result.resource_description is None
        assert len(result.errors) == 1
        assert "JSON parse error" in result.errors[0]

    def test_whitespace_around_block(self):
        content = "# API\n\n```readerspec\n  {\n    \"name\": \"Test API\"\n  }\n```\n\nWith whitespace."
        result = parse_document(content)
        assert result.errors == []
        assert result.resource_description == {"name": "Test API"}

    def test_first_block_wins(self):
        content = "```readerspec\n{\"n\": 1}\n```\n\n```readerspec\n{\"n\": 2}\n```\n"
        assert parse_document(content).resource_description == {"n": 1}

    def test_find_block_returns_raw_text(self):
        assert find_block("x\n```readerspec\n{}\n```\n") == "{}"
        assert find_block("no block") is None


class TestParseBlock:
    def test_raises_structural_error(self):
        with pytest.raises(StructuralParseError, match="JSON parse error"):
            parse_block("{not json")

    def test_decodes(self):
        assert parse_block('{"a": [1, 2]}') == {"a": [1, 2]}

    @pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
    def test_rejects_non_standard_constants(self, constant):
        with pytest.raises(StructuralParseError, match=f"JSON parse error: {constant} is not a valid JSON value"):
            parse_block('{"maxPer": %s}' % constant)


class TestLineEndings:
    def test_crlf_document_parses(self):
        content = (FIXTURES / "todos.readerspec.md").read_text(encoding="utf-8").replace("\n", "\r\n")
        assert split_sections(content).has_block is True
        result = parse_document(content)
        assert result.errors == []
        assert result.resource_description["resource"] == "todos"

    def test_crlf_block_matches_splitter(self):
        content = '## What\r\nTodos\r\n```readerspec\r\n{"n": 1}\r\n```\r\n'
        assert json.loads(split_sections(content).block) == parse_document(content).resource_description

    def test_nan_pagination_is_a_parse_error(self):
        content = '```readerspec\n{"paginate": {"maxPer": NaN, "defaultPer": 10, "startPage": 1}}\n```\n'
        result = parse_document(content)
        assert result.resource_description is None
        assert result.errors == ["JSON parse error: NaN is not a valid JSON value"]


class TestRenderBlock:
    def test_roundtrip_is_validation_equivalent(self):
        data = json.loads(find_block((FIXTURES / "todos.readerspec.md").read_text(encoding="utf-8")))
        original = ResourceDescription.model_validate(data)

        block = render_block(original)
        decoded = parse_block(block)

        assert validate_resource(decoded) == validate_resource(data)
        assert ResourceDescription.model_validate(decoded) == original

    def test_omits_unset_optionals(self):
        rd = ResourceDescription.model_validate({
            "resource": "todos",
            "fields": [{"name": "id", "type": "string"}],
            "filters": [{"field": "q", "op": "search", "target": "title"}],
            "sort": [],
            "paginate": {"maxPer": 10, "defaultPer": 5, "startPage": 1},
            "ownership": {"by": "user"},
            "returns": [],
        })
        decoded = json.loads(render_block(rd))
        assert decoded["fields"] == [{"name": "id", "type": "string"}]
        assert "values" not in decoded["filters"][0]

    def test_fenced_block_is_parseable(self):
        text = "## What\nTodos\n\n" + fence_block('{"resource": "todos"}') + "\n"
        assert parse_document(text).resource_description == {"resource": "todos"}


class TestExtractAll:
    def test_extract_multiple(self):
        docs = [
            "# File 1\n```readerspec\n{\"name\": \"API 1\"}\n```",
            "# File 2\n```readerspec\n{\"name\": \"API 2\"}\n```",
        ]
        results = extract_all(docs)
        assert len(results) == 2
        assert results[0][0] == docs[0]
        assert results[0][1].resource_description == {"name": "API 1"}
        assert results[1][1].resource_description == {"name": "API 2"}

    def test_empty(self):
        assert extract_all([]) == []
