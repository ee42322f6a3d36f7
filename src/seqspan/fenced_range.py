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
from collections.abc import Container, Sized
from dataclasses import dataclass, replace
from typing import Iterable

from .constants import (
    INDEFINITE_END,
    INDEFINITE_START,
    MINUS_STRAND_BRACKETS,
    UNORIENTED_BRACKETS
)
from .enums import Orientation
from .errors import SpanParseError


# Range token without wrapper, e.g.: `<10..>20`, `10..20`, `10`
range_re: re.Pattern = re.compile(r'^(<)?(\d+)(?:\.\.(>)?(\d+))?$')

WRAPPERS: dict[str, tuple[str, Orientation]] = {
    MINUS_STRAND_BRACKETS[0]: (MINUS_STRAND_BRACKETS[1], Orientation.MINUS),
    UNORIENTED_BRACKETS[0]: (UNORIENTED_BRACKETS[1], Orientation.NONE)
}

CLOSING_BRACKETS = frozenset(closing for closing, _ in WRAPPERS.values())


@dataclass(slots=True, frozen=True)
class Range(Sized, Container):
    """Half-open ("fenced") interval: position k is the gap before base k"""

    start: int
    end: int
    orientation: Orientation = Orientation.PLUS
    start_indefinite: bool = False
    end_indefinite: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.start, int) or not isinstance(self.end, int):
            raise TypeError("Invalid range boundary types!")
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid range [{self.start}, {self.end})!")
        if not isinstance(self.orientation, Orientation):
            object.__setattr__(self, 'orientation', Orientation(self.orientation))

    def __len__(self) -> int:
        return self.end - self.start

    def __lt__(self, other: Range) -> bool:
        return (
            self.end < other.end if self.start == other.start else
            self.start < other.start
        )

    def __contains__(self, x) -> bool:
        if isinstance(x, int):
            return self.start <= x < self.end
        elif isinstance(x, Range):
            return self.start <= x.start and x.end <= self.end
        raise TypeError("Operand type not supported!")

    def __str__(self) -> str:
        start = f"{INDEFINITE_START}{self.start}" if self.start_indefinite else str(self.start)
        s = (
            start if self.is_cursor and not self.end_indefinite else
            f"{start}..{INDEFINITE_END if self.end_indefinite else ''}{self.end}"
        )
        match self.orientation:
            case Orientation.MINUS:
                return f"{MINUS_STRAND_BRACKETS[0]}{s}{MINUS_STRAND_BRACKETS[1]}"
            case Orientation.NONE:
                return f"{UNORIENTED_BRACKETS[0]}{s}{UNORIENTED_BRACKETS[1]}"
            case _:
                return s

    @property
    def is_cursor(self) -> bool:
        return self.start == self.end

    @property
    def is_indefinite(self) -> bool:
        return self.start_indefinite or self.end_indefinite

    @classmethod
    def point(cls, pos: int, orientation: Orientation = Orientation.PLUS) -> Range:
        return cls(pos, pos, orientation)

    @classmethod
    def from_length(cls, start: int, length: int, orientation: Orientation = Orientation.PLUS) -> Range:
        if length < 0:
            raise ValueError("Invalid range length: negative!")
        return cls(start, start + length, orientation)

    @classmethod
    def envelope(cls, ranges: Iterable[Range]) -> Range:
        """Smallest unoriented range covering all the input ranges"""

        a = list(ranges)
        if not a:
            raise ValueError("No ranges to envelope!")
        return cls(
            min(r.start for r in a),
            max(r.end for r in a),
            Orientation.NONE)

    def to_tuple(self) -> tuple[int, int]:
        return self.start, self.end

    def to_slice(self) -> slice:
        return slice(self.start, self.end)

    def overlaps(self, other: Range) -> bool:
        return self.start < other.end and self.end > other.start

    def touches(self, other: Range) -> bool:
        return self.end == other.start or other.end == self.start

    def reshape(self, start: int, end: int) -> Range:
        """Clone replacing the boundaries (orientation and flags are kept)"""

        return replace(self, start=start, end=end)

    def offset(self, offset: int) -> Range:
        return replace(self, start=self.start + offset, end=self.end + offset)

    def with_orientation(self, orientation: Orientation) -> Range:
        return replace(self, orientation=orientation)

    def intersect(self, other: Range) -> Range | None:
        """Clip to another range, keeping only the boundary flags that survive the clipping"""

        if not self.overlaps(other):
            return None
        start = max(self.start, other.start)
        end = min(self.end, other.end)
        return replace(
            self,
            start=start,
            end=end,
            start_indefinite=self.start_indefinite and start == self.start,
            end_indefinite=self.end_indefinite and end == self.end)

    def reverse(self, length: int) -> Range:
        """Mirror within a window of the given length (reverse complement coordinates)"""

        if self.end > length:
            raise ValueError(f"Range {self} exceeds window length {length}!")
        return Range(
            length - self.end,
            length - self.start,
            self.orientation.flipped,
            start_indefinite=self.end_indefinite,
            end_indefinite=self.start_indefinite)

    def diff(self, others: Iterable[Range]) -> list[Range]:
        """
        Generate the difference set of ranges

        Zero-length leftovers are dropped; a point is kept unless covered.
        """

        if self.is_cursor:
            return [] if any(
                not other.is_cursor and self.start in other
                for other in others
            ) else [self]

        new_start: int = self.start
        result: list[Range] = []

        for other in sorted(others):
            if other.is_cursor or other.end <= new_start:
                continue
            if other.start >= self.end:
                break
            if other.start > new_start:
                result.append(replace(
                    self,
                    start=new_start,
                    end=other.start,
                    start_indefinite=self.start_indefinite and new_start == self.start,
                    end_indefinite=False))
            new_start = max(new_start, other.end)

        if new_start < self.end:
            result.append(replace(
                self,
                start=new_start,
                start_indefinite=self.start_indefinite and new_start == self.start))

        return result


def parse_range(text: str) -> Range:
    """Parse a single range token (optionally wrapped by an orientation bracket)"""

    s = text.strip()
    if not s:
        raise SpanParseError(text, "empty range")

    orientation = Orientation.PLUS
    wrapper = WRAPPERS.get(s[0])
    if wrapper is not None:
        closing, orientation = wrapper
        if len(s) < 2 or s[-1] != closing:
            raise SpanParseError(text, "unmatched bracket")
        s = s[1:-1].strip()
    elif s[-1] in CLOSING_BRACKETS:
        raise SpanParseError(text, "unmatched bracket")

    m = range_re.match(s)
    if not m:
        raise SpanParseError(text, "invalid range boundaries")

    start = int(m.group(2))
    end = int(m.group(4)) if m.group(4) is not None else start
    if end < start:
        raise SpanParseError(text, "end before start")

    return Range(
        start,
        end,
        orientation,
        start_indefinite=m.group(1) is not None,
        end_indefinite=m.group(3) is not None)
