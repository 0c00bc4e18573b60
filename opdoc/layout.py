"""
Two-column layout of documentation elements and line accumulation for usage text.
"""
from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from .doc_elements import DocElement

MIN_GUTTER = 4


def split_description(text: str) -> List[str]:
    """Split on embedded newlines, dropping trailing empty segments."""
    parts = text.split("\n")
    while len(parts) > 1 and parts[-1] == "":
        parts.pop()
    return parts


def layout_doc_elements(elements: Sequence[DocElement]) -> List[str]:
    """Lay out elements as aligned ``syntax    description`` lines.

    Elements are sorted by syntax label; sorting is stable so equal labels keep
    their input order. Continuation lines are indented to the description
    column of the widest label.
    """
    if not elements:
        return []
    max_len = max(len(element.syntax) for element in elements)
    column = " " * (MIN_GUTTER + max_len)
    lines: List[str] = []
    for element in sorted(elements, key=lambda e: e.syntax):
        if not element.description_lines:
            lines.append(element.syntax)
            continue
        prefix = element.syntax + " " * (MIN_GUTTER + max_len - len(element.syntax))
        for description in element.description_lines:
            for text in split_description(description):
                lines.append(prefix + text)
                prefix = column
    return lines


def render_doc_elements(elements: Sequence[DocElement]) -> str:
    return "".join(line + "\n" for line in layout_doc_elements(elements))


class UsageText:
    """Accumulates finished lines and renders them once."""

    def __init__(self) -> None:
        self._lines: List[str] = []

    def line(self, text: str = "") -> "UsageText":
        self._lines.append(text)
        return self

    def blank(self) -> "UsageText":
        return self.line("")

    def lines(self, texts: Iterable[str]) -> "UsageText":
        self._lines.extend(texts)
        return self

    def section(self, title: str, body: Iterable[str]) -> "UsageText":
        """Blank line, ``title:`` heading, then the body lines."""
        self.blank()
        self.line(f"{title}:")
        return self.lines(body)

    def snapshot(self) -> Tuple[str, ...]:
        return tuple(self._lines)

    def render(self) -> str:
        return "".join(line + "\n" for line in self._lines)
