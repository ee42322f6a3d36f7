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

from pydantic import BaseModel, Field

from .annotation import Annotation
from .enums import Orientation
from .fenced_range import Range
from .span import Span
from .strings.seq_str import SeqStr


class OverlayRange(BaseModel):
    start: int = Field()
    end: int = Field()
    orientation: Orientation = Field(default=Orientation.PLUS)
    start_indefinite: bool = Field(alias='startIndefinite', default=False)
    end_indefinite: bool = Field(alias='endIndefinite', default=False)

    class Config:
        populate_by_name = True

    @classmethod
    def from_range(cls, r: Range) -> OverlayRange:
        return cls(
            start=r.start,
            end=r.end,
            orientation=r.orientation,
            start_indefinite=r.start_indefinite,
            end_indefinite=r.end_indefinite)

    def to_range(self, offset: int = 0) -> Range:
        return Range(
            self.start + offset,
            self.end + offset,
            self.orientation,
            start_indefinite=self.start_indefinite,
            end_indefinite=self.end_indefinite)


class OverlayAnnotation(BaseModel):
    caption: str = Field(default='')
    type: str = Field()
    attributes: dict[str, str] = Field(default_factory=dict)
    relative_ranges: list[OverlayRange] = Field(alias='relativeRanges')

    class Config:
        populate_by_name = True

    @classmethod
    def from_ranges(cls, annotation: Annotation, ranges: Iterable[Range]) -> OverlayAnnotation:
        return cls(
            caption=annotation.caption,
            type=annotation.type,
            attributes=dict(annotation.attributes),
            relative_ranges=[OverlayRange.from_range(r) for r in ranges])

    def get_ranges(self, offset: int = 0) -> list[Range]:
        return [r.to_range(offset=offset) for r in self.relative_ranges]

    def to_annotation(self, offset: int) -> Annotation:
        return Annotation.create(
            Span(tuple(self.get_ranges(offset=offset))),
            caption=self.caption,
            type=self.type,
            attributes=self.attributes)


class CopyOverlay(BaseModel):
    """Copied sequence text with the annotations it carries, relative to the copied text"""

    sequence: str = Field()
    annotations: list[OverlayAnnotation] = Field(default_factory=list)

    def matches(self, text: str) -> bool:
        return self.sequence == text

    def get_annotations(self, position: int) -> list[Annotation]:
        return [a.to_annotation(position) for a in self.annotations]


def _get_relative_ranges(annotation: Annotation, selected: Sequence[Range]) -> list[Range]:
    relative: list[Range] = []
    offset: int = 0
    for sr in selected:
        for ar in annotation.span:
            r = ar.intersect(sr)
            if r is not None:
                relative.append(r.offset(offset - sr.start))
        offset += len(sr)
    return relative


def build_copy_overlay(
    sequence: SeqStr,
    selected: Sequence[Range],
    annotations: Iterable[Annotation]
) -> CopyOverlay:
    """
    Extract the selected text along with the annotations overlapping it

    Selected ranges are concatenated in selection order and the annotation
    ranges are clipped to each of them. A single minus strand selection is
    copied as its reverse complement, mirroring the clipped ranges.
    """

    if not selected:
        raise ValueError("Nothing to copy: no selection!")

    text = SeqStr(''.join(sequence.substr(r) for r in selected))
    reverse = len(selected) == 1 and selected[0].orientation == Orientation.MINUS
    if reverse:
        text = text.revcomp()

    overlay_annotations: list[OverlayAnnotation] = []
    for annotation in annotations:
        relative = _get_relative_ranges(annotation, selected)
        if not relative:
            continue
        if reverse:
            relative = [r.reverse(len(text)) for r in reversed(relative)]
        overlay_annotations.append(OverlayAnnotation.from_ranges(annotation, relative))

    logging.debug("Copied %d bases with %d annotations." % (len(text), len(overlay_annotations)))

    return CopyOverlay(sequence=str(text), annotations=overlay_annotations)
