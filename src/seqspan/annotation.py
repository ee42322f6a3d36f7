########## LICENCE ##########
# seqspan
# Copyright (C) 2024 Genome Research Ltd
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as
# published by the Free Software Foundation, either version 3 of the
# License, or (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
#############################

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterable

from .constants import DEFAULT_ANNOTATION_TYPE
from .enums import MergeDirection, Orientation
from .fenced_range import Range
from .span import Span, parse_span
from .splice import SpliceEdit, drop_collapsed, lift_span
from .utils import get_unique_id


@dataclass(slots=True)
class Annotation:
    """Feature on the sequence"""

    id: str
    span: Span
    caption: str = ''
    type: str = DEFAULT_ANNOTATION_TYPE
    attributes: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Invalid annotation identifier!")
        if not isinstance(self.span, Span):
            raise TypeError("Invalid annotation span: parse the span notation first!")

    def __str__(self) -> str:
        return f"{self.caption} ({self.type}): {self.span}"

    @classmethod
    def create(
        cls,
        span: Span,
        id: str | None = None,
        caption: str | None = None,
        type: str | None = None,
        attributes: dict[str, str] | None = None
    ) -> Annotation:
        """Create an annotation, assigning a unique identifier if none is given"""

        return cls(
            id or get_unique_id(),
            span,
            caption=caption or '',
            type=type or DEFAULT_ANNOTATION_TYPE,
            attributes=dict(attributes or {}))

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Annotation:
        return cls.create(
            parse_span(d['span']),
            id=d.get('id'),
            caption=d.get('caption'),
            type=d.get('type'),
            attributes=d.get('attributes'))

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'caption': self.caption,
            'type': self.type,
            'span': str(self.span),
            'attributes': dict(self.attributes)
        }

    def clone(self, **kwargs) -> Annotation:
        return replace(self, **kwargs)

    @property
    def orientation(self) -> Orientation | None:
        return self.span.orientation

    @property
    def length(self) -> int:
        return self.span.total_length

    @property
    def bounds(self) -> Range:
        return self.span.bounds

    def overlaps(self, start: int, end: int) -> bool:
        return self.span.overlaps(start, end)


@dataclass(slots=True, frozen=True)
class AnnotationUpdate:
    annotation: Annotation
    changed: bool
    degenerate: bool = False
    collapsed: tuple[int, ...] = ()

    def drop_collapsed(self) -> Annotation:
        """Annotation without the ranges the edits removed (a degenerate span is kept)"""

        if self.degenerate or not self.collapsed:
            return self.annotation
        return self.annotation.clone(span=drop_collapsed(self.annotation.span, self.collapsed))


def apply_edits(annotation: Annotation, edits: Iterable[SpliceEdit]) -> AnnotationUpdate:
    adj = lift_span(annotation.span, edits)
    return AnnotationUpdate(
        annotation.clone(span=adj.span) if adj.changed else annotation,
        adj.changed,
        degenerate=adj.degenerate,
        collapsed=adj.collapsed)


def apply_edit(annotation: Annotation, edit: SpliceEdit) -> AnnotationUpdate:
    return apply_edits(annotation, [edit])


def _get_merge_index(ranges: tuple[Range, ...], index: int, direction: MergeDirection) -> int | None:
    other = index - 1 if direction == MergeDirection.LEFT else index + 1
    n = len(ranges)
    if not (0 <= index < n and 0 <= other < n):
        return None
    a = ranges[index]
    b = ranges[other]
    if a.orientation != b.orientation or not a.touches(b):
        return None
    return other


def can_merge(annotation: Annotation, index: int, direction: MergeDirection) -> bool:
    """Test whether a range can be merged with its neighbour in the given direction"""

    return _get_merge_index(annotation.span.ranges, index, direction) is not None


def merge_ranges(annotation: Annotation, index: int, direction: MergeDirection) -> Annotation | None:
    """
    Merge a range with the adjacent one in the given direction

    Ranges merge only when they touch and share the orientation; None is
    returned when the merge is not applicable.
    """

    ranges = annotation.span.ranges
    other = _get_merge_index(ranges, index, direction)
    if other is None:
        return None

    i = min(index, other)
    a, b = sorted([ranges[i], ranges[i + 1]])
    merged = Range(
        a.start,
        b.end,
        a.orientation,
        start_indefinite=a.start_indefinite,
        end_indefinite=b.end_indefinite)

    return annotation.clone(span=Span((*ranges[:i], merged, *ranges[i + 2:])))


def _covers(annotation: Annotation, r: Range) -> bool:
    return any(
        r.start in ar if r.is_cursor else ar.overlaps(r)
        for ar in annotation.span
        if not ar.is_cursor
    )


def subtract_from_selection(annotation: Annotation, ranges: Iterable[Range] | None) -> list[Range] | None:
    """
    Difference between the selected ranges and the span of an annotation

    None is returned when the subtraction is not applicable, that is when
    nothing is selected or the annotation does not cover any selected range;
    an empty list means the annotation covers the whole selection.
    """

    if not ranges:
        return None

    selected = list(ranges)
    if not any(_covers(annotation, r) for r in selected):
        return None

    return [
        r
        for sr in selected
        for r in sr.diff(annotation.span.ranges)
    ]
