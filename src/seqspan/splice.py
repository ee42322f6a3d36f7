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

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from .errors import InvalidEdit
from .fenced_range import Range
from .selection import is_contiguous, is_contiguous_with_wrap
from .span import Span


@dataclass(slots=True, frozen=True)
class SpliceEdit:
    """Removal of a number of bases at a position followed by an insertion there"""

    start: int
    removed_length: int = 0
    inserted_length: int = 0

    def __post_init__(self) -> None:
        if self.start < 0:
            raise InvalidEdit(f"Invalid edit position {self.start}: negative!")
        if self.removed_length < 0 or self.inserted_length < 0:
            raise InvalidEdit("Invalid edit length: negative!")

    def __str__(self) -> str:
        return (
            f"{self.start}ins{self.inserted_length}" if self.is_insertion else
            f"{self.start}_{self.end}del" if self.is_deletion else
            f"{self.start}_{self.end}delins{self.inserted_length}"
        )

    @property
    def end(self) -> int:
        return self.start + self.removed_length

    @property
    def inserted_end(self) -> int:
        return self.start + self.inserted_length

    @property
    def delta(self) -> int:
        return self.inserted_length - self.removed_length

    @property
    def is_insertion(self) -> bool:
        return self.removed_length == 0

    @property
    def is_deletion(self) -> bool:
        return self.inserted_length == 0 and self.removed_length > 0

    @property
    def removed_range(self) -> Range:
        return Range(self.start, self.end)

    @classmethod
    def insertion(cls, pos: int, length: int) -> SpliceEdit:
        return cls(pos, 0, length)

    @classmethod
    def deletion(cls, r: Range) -> SpliceEdit:
        return cls(r.start, len(r), 0)

    @classmethod
    def replacement(cls, r: Range, length: int) -> SpliceEdit:
        return cls(r.start, len(r), length)

    def validate(self, sequence_length: int) -> None:
        if self.start > sequence_length:
            raise InvalidEdit(
                f"Invalid edit position {self.start}: "
                f"beyond sequence length {sequence_length}!")
        if self.end > sequence_length:
            raise InvalidEdit(
                f"Invalid edit range [{self.start}, {self.end}): "
                f"beyond sequence length {sequence_length}!")


@dataclass(slots=True, frozen=True)
class SpanAdjustment:
    """
    Span lifted over one or more edits

    Ranges removed by the edits are kept as points at the edit position and
    their indices listed in `collapsed`; whether to drop them is left to the
    caller. A span whose ranges all collapsed degenerates into a single point.
    """

    span: Span
    changed: bool
    degenerate: bool = False
    collapsed: tuple[int, ...] = ()

    @property
    def is_partially_collapsed(self) -> bool:
        return bool(self.collapsed) and not self.degenerate


def adjust_range(r: Range, edit: SpliceEdit) -> tuple[Range, bool]:
    """
    Lift a range over an edit

    Returns the adjusted range and whether it collapsed because the edit
    removed all of it. Text inserted at the start of a range becomes part of
    it, text inserted at its end does not.
    """

    start = edit.start
    end = edit.end

    # Entirely before the edit (includes insertions at the end boundary)
    if r.end <= start:
        return r, False

    # Insertion at the start boundary
    if edit.is_insertion and r.start == start:
        return r.reshape(r.start, r.end + edit.delta), False

    # Entirely after the edit
    if r.start >= end:
        return r.offset(edit.delta), False

    if r.start >= start:

        # Removed by the edit
        if r.end <= end:
            return Range.point(start, r.orientation), True

        # Overlapping the right edge of the edit
        return r.reshape(edit.inserted_end, r.end + edit.delta), False

    # Overlapping the left edge of the edit
    if r.end <= end:
        return r.reshape(r.start, start), False

    # Spanning across the edit
    return r.reshape(r.start, r.end + edit.delta), False


def adjust_span(span: Span, edit: SpliceEdit) -> SpanAdjustment:
    """
    Lift all the ranges of a span over an edit

    Collapsed ranges stay in place as points and are reported by index; when
    all ranges collapse, the span degenerates into a point at the edit position.
    """

    results = [adjust_range(r, edit) for r in span]
    collapsed = tuple(i for i, (_, is_collapsed) in enumerate(results) if is_collapsed)

    if len(collapsed) == len(results):
        return SpanAdjustment(
            Span.point(edit.start, span.ranges[0].orientation),
            True,
            degenerate=True,
            collapsed=(0,))

    new_span = span.with_ranges(r for r, _ in results)
    return SpanAdjustment(new_span, new_span != span, collapsed=collapsed)


def lift_span(span: Span, edits: Iterable[SpliceEdit]) -> SpanAdjustment:
    """Lift a span over a series of edits, applied in order"""

    adj = SpanAdjustment(span, False)

    for edit in edits:
        a = adjust_span(adj.span, edit)
        changed = adj.changed or a.changed

        if adj.degenerate or a.degenerate:
            adj = SpanAdjustment(a.span, changed, degenerate=True, collapsed=(0,))
            continue

        collapsed = tuple(sorted({*adj.collapsed, *a.collapsed}))
        if len(collapsed) == a.span.range_count:

            # Ranges collapsed by different edits
            adj = SpanAdjustment(
                Span.point(a.span.start, a.span.ranges[0].orientation),
                True,
                degenerate=True,
                collapsed=(0,))

        else:
            adj = SpanAdjustment(a.span, changed, collapsed=collapsed)

    return adj


def drop_collapsed(span: Span, collapsed: Iterable[int]) -> Span:
    """Remove the collapsed ranges from a span, unless none would be left"""

    indices = set(collapsed)
    if not indices or len(indices) >= span.range_count:
        return span

    return span.with_ranges(r for i, r in enumerate(span) if i not in indices)


def get_deletion_edits(ranges: Sequence[Range], sequence_length: int | None = None) -> list[SpliceEdit]:
    """
    Convert ranges to delete into edits, from the highest to the lowest range

    Applying the edits in this order means each of them is expressed in
    coordinates not yet shifted by the others. Zero-length ranges are skipped.
    """

    a = sorted(r for r in ranges if not r.is_cursor)
    if not a:
        raise InvalidEdit("Nothing to delete: no range of nonzero length!")

    for i in range(1, len(a)):
        if a[i - 1].overlaps(a[i]):
            raise InvalidEdit(f"Overlapping ranges to delete: {a[i - 1]} and {a[i]}!")

    edits = [SpliceEdit.deletion(r) for r in reversed(a)]

    if sequence_length is not None:
        for edit in edits:
            edit.validate(sequence_length)

    return edits


def delete_ranges(
    spans: Sequence[Span],
    ranges: Sequence[Range],
    sequence_length: int | None = None
) -> list[SpanAdjustment]:
    """Lift the spans over the deletion of multiple ranges"""

    edits = get_deletion_edits(ranges, sequence_length=sequence_length)
    logging.debug("Deleting %d ranges: %s." % (len(edits), ', '.join(map(str, edits))))

    return [lift_span(span, edits) for span in spans]


def get_post_delete_selection(
    ranges: Sequence[Range],
    sequence_length: int,
    circular: bool = True
) -> list[Range] | None:
    """
    Selection left after deleting the given ranges

    A single range, or several ranges tiling end to end (possibly across the
    origin of a circular sequence), leave a cursor at the lowest deleted
    position; otherwise nothing stays selected.
    """

    a = sorted(r for r in ranges if not r.is_cursor)
    if not a:
        return None

    if len(a) == 1 or (
        is_contiguous_with_wrap(a, sequence_length) if circular else
        is_contiguous(a)
    ):
        return [Range.point(a[0].start)]

    return None


def get_post_replace_selection(edit: SpliceEdit) -> list[Range]:
    return [Range(edit.start, edit.inserted_end)]


def get_post_insert_selection(edit: SpliceEdit) -> list[Range]:
    return [Range.point(edit.inserted_end)]
