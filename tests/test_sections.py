from pathlib import Path

import pytest

from readerspec.parser.sections import classify_section, split_sections

FIXTURES = Path(__file__).parent / "fixtures"


class TestClassifySection:
    @pytest.mark.parametrize(
        "title, expected",
        [
            ("What you can ask for", "what"),
            ("Ask", "what"),
            ("How to narrow it down", "how"),
            ("What you get back", "what"),
            ("Returns", "returns"),
            ("You get back", "returns"),
            ("Example", "example"),
            ("It looks like this", "example"),
            ("Ownership", "belongs"),
            ("Belongs to", "belongs"),
            ("Combine filters", "combine"),
            ("Mix and match", "combine"),
            ("Notes", "notes"),
            ("Miscellaneous", "what"),
        ],
    )
    def test_first_matching_rule_wins(self, title, expected):
        assert classify_section(title) == expected

    def test_case_insensitive(self):
        assert classify_section("RETURNS") == "returns"

    def test_earlier_rule_beats_later_one(self):
        # "how" and "note" both match; "how" comes first.
        assert classify_section("Notes on how to filter") == "how"


class TestSplitSections:
    def test_single_section_without_block(self):
        result = split_sections("## What\nGet all todos\n")
        assert len(result.sections) == 1
        assert result.sections[0].type == "what"
        assert result.sections[0].title == "What"
        assert result.sections[0].content == "Get all todos\n"
        assert result.block is None
        assert result.has_block is False

    def test_blank_lines_dropped_but_section_continues(self):
        result = split_sections("## What\nline one\n\n   \nline two\n")
        assert result.sections[0].content == "line one\nline two\n"

    def test_text_before_first_heading_is_ignored(self):
        result = split_sections("# Title\nintro\n## How\nby status\n")
        assert len(result.sections) == 1
        assert result.sections[0].content == "by status\n"

    def test_block_is_captured_and_not_section_content(self):
        text = "## What\nTodos\n```readerspec\n{\"resource\": \"todos\"}\n```\nafter\n"
        result = split_sections(text)
        assert result.has_block is True
        assert result.block == '{"resource": "todos"}'
        assert result.sections[0].content == "Todos\nafter\n"

    def test_block_lines_captured_verbatim(self):
        text = "```readerspec\n## not a heading\n\n{}\n```\n"
        result = split_sections(text)
        assert result.sections == []
        assert result.block == "## not a heading\n\n{}"

    def test_unterminated_block_is_discarded(self):
        text = "## What\nTodos\n```readerspec\n{\n## Later\nmore\n"
        result = split_sections(text)
        assert result.block is None
        assert result.has_block is False
        assert len(result.sections) == 1

    def test_second_block_is_plain_text(self):
        text = (
            "## What\nTodos\n"
            "```readerspec\n{\"a\": 1}\n```\n"
            "```readerspec\n{\"b\": 2}\n```\n"
        )
        result = split_sections(text)
        assert result.block == '{"a": 1}'
        assert '{"b": 2}' in result.sections[0].content

    def test_sections_keep_document_order(self):
        result = split_sections((FIXTURES / "todos.readerspec.md").read_text(encoding="utf-8"))
        assert [s.type for s in result.sections] == ["what", "how", "what"]
        assert result.has_block is True
        assert result.sections[-1].content.endswith("Notes below the block stay untouched.\n")
