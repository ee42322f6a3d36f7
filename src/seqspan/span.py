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

import re
from dataclasses import dataclass
from typing import Iterable, Iterator

from .constants import SPAN_SEPARATOR
from .enums import Orientation
from .errors import SpanParseError
from .fenced_range import Range, parse_range


span_separator_re: re.Pattern = re.compile(r'\s*\+\s*')


@dataclass(slots=True, frozen=True)
class Span:
    """
    Location of one feature as an ordered list of ranges

    The order of the ranges is the 5' to 3' assembly order of the feature,
    not necessarily ascending by position.
    """

    ranges: tuple[Range, ...]

    def __post_init__(self) -> None:
        ranges = tuple(self.ranges)
        if not ranges:
            raise ValueError("Invalid span: no ranges!")
        if not all(isinstance(r, Range) for r in ranges):
            raise TypeError("Invalid span: ranges expected!")
        object.__setattr__(self, 'ranges', ranges)

    def __str__(self) -> str:
        return SPAN_SEPARATOR.join(map(str, self.ranges))

    def __iter__(self) -> Iterator[Range]:
        return iter(self.ranges)

    def __getitem__(self, i: int) -> Range:
        return self.ranges[i]

    @classmethod
    def parse(cls, text: str) -> Span:
        return parse_span(text)

    @classmethod
    def point(cls, pos: int, orientation: Orientation = Orientation.PLUS) -> Span:
        return cls((Range.point(pos, orientation),))

    @classmethod
    def from_ranges(cls, ranges: Iterable[Range]) -> Span:
        return cls(tuple(ranges))

    @property
    def range_count(self) -> int:
        return len(self.ranges)

    @property
    def is_single(self) -> bool:
        return len(self.ranges) == 1

    @property
    def bounds(self) -> Range:
        return Range.envelope(self.ranges)

    @property
    def start(self) -> int:
        return min(r.start for r in self.ranges)

    @property
    def end(self) -> int:
        return max(r.end for r in self.ranges)

    @property
    def total_length(self) -> int:
        return sum(len(r) for r in self.ranges)

    @property
    def orientation(self) -> Orientation | None:
        """Shared orientation of all the ranges, if any (None when mixed)"""

        first = self.ranges[0].orientation
        return first if all(r.orientation == first for r in self.ranges) else None

    @property
    def is_degenerate(self) -> bool:
        return all(r.is_cursor for r in self.ranges)

    def overlaps(self, start: int, end: int) -> bool:
        return self.start < end and self.end > start

    def with_ranges(self, ranges: Iterable[Range]) -> Span:
        return Span(tuple(ranges))

    def offset(self, offset: int) -> Span:
        return Span(tuple(r.offset(offset) for r in self.ranges))


def parse_span(text: str) -> Span:
    """Parse the span notation, e.g.: `<10..20 + (30..>40)`"""

    if not text or not text.strip():
        raise SpanParseError(text, "empty span")

    tokens = span_separator_re.split(text.strip())
    if any(not token for token in tokens):
        raise SpanParseError(text, "empty range")

    try:
        return Span(tuple(parse_range(token) for token in tokens))
    except SpanParseError as ex:
        raise SpanParseError(text, ex.reason) from ex
