"""Split a readerspec document into prose sections and its embedded block."""

from readerspec.parser.base import HumanReadableSection, SplitResult

OPEN_MARKER = "```readerspec"
CLOSE_FENCE = "```"
HEADING_PREFIX = "## "

# Evaluated top to bottom, first match wins.
SECTION_RULES: list[tuple[tuple[str, ...], str]] = [
    (("what", "ask"), "what"),
    (("how", "narrow"), "how"),
    (("return", "get back"), "returns"),
    (("example", "looks like"), "example"),
    (("belong", "ownership"), "belongs"),
    (("combine", "mix"), "combine"),
    (("note",), "notes"),
]
DEFAULT_SECTION_TYPE = "what"


def classify_section(title: str) -> str:
    """Infer a section type from its heading text."""
    lowered = title.lower()
    for keywords, section_type in SECTION_RULES:
        if any(keyword in lowered for keyword in keywords):
            return section_type
    return DEFAULT_SECTION_TYPE


def is_open_marker(line: str) -> bool:
    return line.strip().startswith(OPEN_MARKER)


def is_close_fence(line: str) -> bool:
    return line.strip() == CLOSE_FENCE


def split_sections(text: str) -> SplitResult:
    """Scan document lines into ``## `` sections and the first readerspec block.

    The scanner has two states, default and in-block. An unterminated
    block is dropped; a second opening marker is kept as ordinary text.
    """
    sections: list[HumanReadableSection] = []
    current: HumanReadableSection | None = None
    block: str | None = None
    has_block = False

    in_block = False
    captured: list[str] = []

    for line in text.split("\n"):
        if in_block:
            if is_close_fence(line):
                in_block = False
                has_block = True
                block = "\n".join(captured).strip()
            else:
                captured.append(line)
            continue

        if not has_block and is_open_marker(line):
            in_block = True
            captured = []
            continue

        if line.startswith(HEADING_PREFIX):
            if current is not None:
                sections.append(current)
            title = line[len(HEADING_PREFIX):].strip()
            current = HumanReadableSection(type=classify_section(title), title=title)
        elif current is not None and line.strip():
            current.content += line + "\n"

    if current is not None:
        sections.append(current)

    return SplitResult(sections=sections, block=block, has_block=has_block)
