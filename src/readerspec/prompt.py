"""Builds the completion prompt from human-readable sections."""

from pathlib import Path

from readerspec.parser.base import HumanReadableSection

PROMPTS_DIR = Path(__file__).parent / "prompts"

PROMPT_INTRO = (
    "Based on the following human-readable API specification sections, "
    "generate a valid JSON block for the ReaderSpec format:\n\n"
)


def load_schema_footer() -> str:
    return (PROMPTS_DIR / "translate.md").read_text(encoding="utf-8")


def format_sections_for_prompt(sections: list[HumanReadableSection]) -> str:
    """Render sections in document order, followed by the schema footer."""
    parts = [PROMPT_INTRO]
    for section in sections:
        parts.append(f"## {section.title}\n{section.content}\n\n")
    parts.append("\n")
    parts.append(load_schema_footer())
    return "".join(parts)
