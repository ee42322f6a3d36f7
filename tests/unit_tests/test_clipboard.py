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

import pytest
from seqspan.annotation import Annotation
from seqspan.clipboard import CopyOverlay, OverlayAnnotation, OverlayRange, build_copy_overlay
from seqspan.enums import Orientation
from seqspan.fenced_range import Range
from seqspan.span import parse_span
from seqspan.strings.seq_str import SeqStr


seq = SeqStr('ACGTACGTACGTACGTACGT')


def get_annotation(span: str) -> Annotation:
    return Annotation.create(parse_span(span), caption='feature', type='CDS', attributes={'gene': 'x'})


def test_build_copy_overlay():
    overlay = build_copy_overlay(seq, [Range(3, 18)], [get_annotation('5..15'), get_annotation('18..20')])

    assert overlay.sequence == 'TACGTACGTACGTAC'
    assert len(overlay.annotations) == 1

    a = overlay.annotations[0]
    assert a.caption == 'feature'
    assert a.type == 'CDS'
    assert a.attributes == {'gene': 'x'}
    assert a.get_ranges() == [Range(2, 12)]


def test_build_copy_overlay_clipped():
    overlay = build_copy_overlay(seq, [Range(10, 20)], [get_annotation('<5..>15 + 17..30')])
    assert overlay.annotations[0].get_ranges() == [
        Range(0, 5, end_indefinite=True),
        Range(7, 10)
    ]


def test_build_copy_overlay_multiple_ranges():
    overlay = build_copy_overlay(seq, [Range(0, 4), Range(10, 20)], [get_annotation('2..12')])

    assert overlay.sequence == 'ACGT' + 'GTACGTACGT'
    assert overlay.annotations[0].get_ranges() == [Range(2, 4), Range(4, 6)]


def test_build_copy_overlay_reverse():
    overlay = build_copy_overlay(seq, [Range(0, 20, Orientation.MINUS)], [get_annotation('5..10')])

    assert overlay.sequence == str(seq.revcomp())
    assert overlay.annotations[0].get_ranges() == [Range(10, 15, Orientation.MINUS)]


def test_build_copy_overlay_empty():
    with pytest.raises(ValueError):
        build_copy_overlay(seq, [], [])


def test_copy_overlay_annotations():
    overlay = CopyOverlay(
        sequence='ACGT',
        annotations=[
            OverlayAnnotation(
                type='gene',
                relativeRanges=[
                    OverlayRange(start=0, end=2, startIndefinite=True),
                    OverlayRange(start=3, end=4, orientation=Orientation.MINUS)
                ])
        ])

    assert overlay.matches('ACGT')
    assert not overlay.matches('ACG')

    annotations = overlay.get_annotations(100)
    assert len(annotations) == 1
    assert str(annotations[0].span) == '<100..102 + (103..104)'
    assert annotations[0].type == 'gene'


def test_overlay_range():
    r = Range(2, 8, Orientation.MINUS, start_indefinite=True, end_indefinite=True)
    overlay_range = OverlayRange.from_range(r)

    assert overlay_range.start_indefinite
    assert overlay_range.end_indefinite
    assert overlay_range.to_range() == r
    assert overlay_range.to_range(offset=10) == Range(
        12, 18, Orientation.MINUS, start_indefinite=True, end_indefinite=True)


def test_build_copy_overlay_reverse_indefinite():
    overlay = build_copy_overlay(seq, [Range(0, 20, Orientation.MINUS)], [get_annotation('<5..10')])
    assert overlay.annotations[0].get_ranges() == [
        Range(10, 15, Orientation.MINUS, end_indefinite=True)
    ]


def test_copy_overlay_json():
    overlay = build_copy_overlay(seq, [Range(3, 18)], [get_annotation('<5..>15')])
    assert CopyOverlay.model_validate_json(overlay.model_dump_json(by_alias=True)) == overlay
    assert overlay.annotations[0].get_ranges() == [
        Range(2, 12, start_indefinite=True, end_indefinite=True)
    ]
