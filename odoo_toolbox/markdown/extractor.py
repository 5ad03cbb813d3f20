"""
Extraction of testable code blocks from markdown documentation.

A block is opened by a fence such as::

    ```python testable id="create-partner" needs="client" creates="res.partner" expect="result > 0"

and closed by a bare fence. ``id`` is required; blocks without it are
skipped with a warning.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger("odoo_toolbox.markdown")

OPEN_FENCE = re.compile(r"^```(\w+)\s+testable\s+(.*)$")
CLOSE_FENCE = re.compile(r"^```\s*$")
ATTRIBUTE = re.compile(r"""(\w+)=["']([^"']*)["']""")
LINE_BREAK = re.compile(r"\r?\n")

SKIPPED_DIRECTORIES = frozenset({"__tests__", "node_modules"})


@dataclass
class TestableBlock:
    id: str
    language: str
    code: str
    source_file: str
    line_number: int
    needs: list[str] = field(default_factory=list)
    creates: str | None = None
    expect: str | None = None
    skip: str | None = None
    timeout: float | None = None

    # Keep pytest from collecting this class.
    __test__ = False


def parse_attributes(text: str) -> dict[str, str]:
    return {m.group(1): m.group(2) for m in ATTRIBUTE.finditer(text)}


def _parse_timeout(value: str | None, location: str) -> float | None:
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring invalid timeout %r at %s", value, location)
        return None


def extract_from_string(content: str, source_file: str = "<string>") -> list[TestableBlock]:
    """Return every testable block in ``content``, in document order."""
    blocks: list[TestableBlock] = []
    current: TestableBlock | None = None
    code_lines: list[str] = []

    for index, raw_line in enumerate(LINE_BREAK.split(content)):
        line = raw_line.rstrip()
        line_number = index + 1

        if current is None:
            match = OPEN_FENCE.match(line)
            if not match:
                continue
            attrs = parse_attributes(match.group(2))
            if not attrs.get("id"):
                logger.warning(
                    "testable block at %s:%d missing required 'id' attribute",
                    source_file, line_number,
                )
                continue
            location = f"{source_file}:{line_number}"
            current = TestableBlock(
                id=attrs["id"],
                language=match.group(1),
                code="",
                source_file=source_file,
                line_number=line_number,
                needs=[n.strip() for n in attrs.get("needs", "").split(",") if n.strip()],
                creates=attrs.get("creates") or None,
                expect=attrs.get("expect") or None,
                skip=attrs.get("skip"),
                timeout=_parse_timeout(attrs.get("timeout"), location),
            )
            code_lines = []
        elif CLOSE_FENCE.match(line):
            current.code = "\n".join(code_lines)
            blocks.append(current)
            current = None
        else:
            code_lines.append(line)

    if current is not None:
        logger.warning(
            "unclosed code block starting at %s:%d", source_file, current.line_number
        )

    return blocks


def filter_blocks(
    blocks: list[TestableBlock],
    ids: list[str] | None = None,
    needs: list[str] | None = None,
    include_skipped: bool = False,
) -> list[TestableBlock]:
    """Keep blocks matching any of ``ids`` and sharing any of ``needs``."""
    result = []
    for block in blocks:
        if ids and block.id not in ids:
            continue
        if needs and not set(needs).intersection(block.needs):
            continue
        if block.skip is not None and not include_skipped:
            continue
        result.append(block)
    return result


def extract_from_file(path: str | Path, source_file: str | None = None) -> list[TestableBlock]:
    path = Path(path)
    return extract_from_string(path.read_text(encoding="utf-8"), source_file or str(path))


def find_markdown_files(root: str | Path) -> list[Path]:
    root = Path(root)
    files: list[Path] = []
    for entry in sorted(root.iterdir()):
        if entry.is_dir():
            if entry.name in SKIPPED_DIRECTORIES or entry.name.startswith("."):
                continue
            files.extend(find_markdown_files(entry))
        elif entry.is_file() and entry.suffix == ".md":
            files.append(entry)
    return files


def extract_from_directory(root: str | Path) -> list[TestableBlock]:
    """Extract blocks from every markdown file below ``root``.

    ``source_file`` is recorded relative to ``root``.
    """
    root = Path(root)
    blocks: list[TestableBlock] = []
    for path in find_markdown_files(root):
        blocks.extend(extract_from_file(path, path.relative_to(root).as_posix()))
    return blocks


def group_by_source_file(blocks: list[TestableBlock]) -> dict[str, list[TestableBlock]]:
    grouped: dict[str, list[TestableBlock]] = {}
    for block in blocks:
        grouped.setdefault(block.source_file, []).append(block)
    return grouped


def get_section_name(source_file: str) -> str:
    return source_file[:-3] if source_file.endswith(".md") else source_file
