"""
Non-destructive edit buffer keyed to offsets of the original text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple, Union

from .errors import EditConflictError


@dataclass
class Replacement:
    start: int
    end: int
    text: str


class EditBuffer:
    """
    Records splices against an original text and renders them on demand.

    Range edits must not partially overlap. A range edit that fully covers
    earlier edits supersedes them, which is how a span is edited, sliced and
    then replaced as a whole. Insertions anchor at a single offset and may not
    fall strictly inside a replaced range.
    """

    def __init__(self, original: str) -> None:
        self.original = original
        self._replacements: List[Replacement] = []
        self._insertions: Dict[int, List[str]] = {}

    def __len__(self) -> int:
        return len(self._replacements) + sum(len(texts) for texts in self._insertions.values())

    @property
    def has_edits(self) -> bool:
        return len(self) > 0

    def overwrite(self, start: int, end: int, text: str) -> None:
        self._check_range(start, end)
        if start == end:
            raise EditConflictError(f"Cannot overwrite an empty range at {start}; use append()")
        kept: List[Replacement] = []
        for existing in self._replacements:
            if existing.end <= start or existing.start >= end:
                kept.append(existing)
            elif start <= existing.start and existing.end <= end:
                continue
            else:
                raise EditConflictError.from_code(
                    "PC-3001",
                    edit=f"[{start}, {end})",
                    existing=f"[{existing.start}, {existing.end})",
                )
        for offset in [offset for offset in self._insertions if start < offset < end]:
            del self._insertions[offset]
        kept.append(Replacement(start, end, text))
        kept.sort(key=lambda item: item.start)
        self._replacements = kept

    def remove(self, start: int, end: int) -> None:
        if start == end:
            return
        self.overwrite(start, end, "")

    def append(self, offset: int, text: str) -> None:
        """Insert ``text`` at ``offset``, after anything already inserted there."""
        self._check_insertion(offset)
        self._insertions.setdefault(offset, []).append(text)

    def prepend(self, offset: int, text: str) -> None:
        """Insert ``text`` at ``offset``, before anything already inserted there."""
        self._check_insertion(offset)
        self._insertions.setdefault(offset, []).insert(0, text)

    def slice(self, start: int, end: int) -> str:
        """Rendered text of ``original[start:end]``, with the edits inside it applied."""
        return self._render(start, end, include_bounds=False)

    def render(self) -> str:
        return self._render(0, len(self.original), include_bounds=True)

    def __str__(self) -> str:
        return self.render()

    def _check_range(self, start: int, end: int) -> None:
        if not 0 <= start <= end <= len(self.original):
            raise EditConflictError(f"Range [{start}, {end}) is outside the original text")

    def _check_insertion(self, offset: int) -> None:
        self._check_range(offset, offset)
        for existing in self._replacements:
            if existing.start < offset < existing.end:
                raise EditConflictError.from_code(
                    "PC-3001",
                    edit=f"insertion at {offset}",
                    existing=f"[{existing.start}, {existing.end})",
                )

    def _render(self, start: int, end: int, *, include_bounds: bool) -> str:
        self._check_range(start, end)
        events: List[Tuple[int, int, Union[List[str], Replacement]]] = []
        for offset, texts in self._insertions.items():
            if start < offset < end or (include_bounds and offset in (start, end)):
                events.append((offset, 0, texts))
        for replacement in self._replacements:
            if replacement.end <= start or replacement.start >= end:
                continue
            if replacement.start < start or replacement.end > end:
                raise EditConflictError.from_code(
                    "PC-3001",
                    edit=f"slice [{start}, {end})",
                    existing=f"[{replacement.start}, {replacement.end})",
                )
            events.append((replacement.start, 1, replacement))
        # Insertions at an offset render before a replacement starting there.
        events.sort(key=lambda event: (event[0], event[1]))

        parts: List[str] = []
        position = start
        for offset, _, payload in events:
            if offset > position:
                parts.append(self.original[position:offset])
                position = offset
            if isinstance(payload, Replacement):
                parts.append(payload.text)
                position = payload.end
            else:
                parts.extend(payload)
        parts.append(self.original[position:end])
        return "".join(parts)
