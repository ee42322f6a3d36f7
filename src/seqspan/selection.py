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
from typing import Iterable, Sequence

from .constants import ANNOTATION_ID_PREFIX
from .enums import Orientation
from .errors import SelectionError
from .fenced_range import Range
from .span import Span, parse_span


def _count_gaps(ranges: Sequence[Range]) -> int:
    return sum(1 for i in range(1, len(ranges)) if ranges[i - 1].end != ranges[i].start)


def is_contiguous(ranges: Sequence[Range]) -> bool:
    """Test whether the ranges tile end to end"""

    return bool(ranges) and _count_gaps(sorted(ranges)) == 0


def is_contiguous_with_wrap(ranges: Sequence[Range], length: int) -> bool:
    """
    Test whether the ranges tile end to end on a circular sequence

    On a circular sequence of the given length, a single gap is allowed if the
    ranges touch both the origin and the end of the sequence.
    """

    if not ranges:
        return False

    a = sorted(ranges)
    gaps = _count_gaps(a)

    if gaps == 0:
        return True

    return gaps == 1 and a[0].start == 0 and a[-1].end == length


def validate_selection_ranges(ranges: Sequence[Range]) -> None:
    if not ranges:
        raise SelectionError("Invalid selection: no ranges!")
    a = sorted(ranges)
    for i in range(1, len(a)):
        if a[i - 1].overlaps(a[i]) or a[i - 1] == a[i]:
            raise SelectionError(f"Invalid selection: {a[i - 1]} overlaps {a[i]}!")


class SelectionDomain:
    """Current multi-range selection (None when nothing is selected)"""

    __slots__ = ['_ranges']

    def __init__(self, ranges: Iterable[Range] | None = None) -> None:
        self._ranges: tuple[Range, ...] | None = None
        if ranges is not None:
            self.set_ranges(ranges)

    def __str__(self) -> str:
        return str(self.span) if self._ranges else ''

    def __repr__(self) -> str:
        return f"SelectionDomain({self})"

    @property
    def ranges(self) -> tuple[Range, ...] | None:
        return self._ranges

    @property
    def span(self) -> Span | None:
        return Span(self._ranges) if self._ranges else None

    @property
    def is_selected(self) -> bool:
        return self._ranges is not None

    @property
    def is_single_range(self) -> bool:
        return self._ranges is not None and len(self._ranges) == 1

    @property
    def is_cursor(self) -> bool:
        return self.is_single_range and self._ranges[0].is_cursor

    @property
    def total_length(self) -> int:
        return sum(len(r) for r in self._ranges) if self._ranges else 0

    def get_selection(self) -> tuple[int, int] | None:
        """Boundaries of the first selected range"""

        return self._ranges[0].to_tuple() if self._ranges else None

    def set_ranges(self, ranges: Iterable[Range] | None) -> None:
        if ranges is None:
            self._ranges = None
            return
        a = tuple(ranges)
        validate_selection_ranges(a)
        self._ranges = a

    def select(self, text: str, annotations: Iterable | None = None) -> bool:
        """
        Replace the selection parsing the span notation

        A leading `a:<id>` selects the span of the annotation with that
        identifier; if no such annotation exists the selection is left as is
        and False is returned.
        """

        s = text.strip()
        if s.startswith(ANNOTATION_ID_PREFIX):
            annotation_id = s[len(ANNOTATION_ID_PREFIX):].strip()
            for annotation in annotations or []:
                if annotation.id == annotation_id:
                    self.set_ranges(annotation.span.ranges)
                    return True
            logging.debug("Annotation '%s' not found: selection unchanged." % annotation_id)
            return False

        self.set_ranges(parse_span(s).ranges)
        return True

    def add_range(self, start: int, end: int, orientation: Orientation = Orientation.PLUS) -> Range:
        """Append a new disjoint range (a cursor if the boundaries match)"""

        r = Range(start, end, orientation)
        self.set_ranges([*self._ranges, r] if self._ranges else [r])
        return r

    def set_cursor(self, pos: int) -> None:
        self.set_ranges([Range.point(pos)])

    def extend_to(self, start: int, end: int) -> None:
        """Grow the first selected range to cover an interval (single range result)"""

        if not self._ranges:
            self.set_ranges([Range(start, end)])
            return

        first = self._ranges[0]
        self.set_ranges([first.reshape(min(first.start, start), max(first.end, end))])

    def clear(self) -> None:
        self._ranges = None

    def validate_bounds(self, sequence_length: int) -> None:
        if self._ranges and any(r.end > sequence_length for r in self._ranges):
            raise SelectionError(
                f"Invalid selection {self}: beyond sequence length {sequence_length}!")
