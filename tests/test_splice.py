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

from contextlib import nullcontext

import pytest
from seqspan.enums import Orientation
from seqspan.errors import InvalidEdit
from seqspan.fenced_range import Range
from seqspan.span import Span, parse_span
from seqspan.splice import (
    SpliceEdit,
    adjust_range,
    adjust_span,
    delete_ranges,
    drop_collapsed,
    get_deletion_edits,
    get_post_delete_selection,
    get_post_insert_selection,
    get_post_replace_selection,
    lift_span
)


@pytest.mark.parametrize('edit,exp_range,exp_collapsed', [

    # Insertions
    (SpliceEdit(5, 0, 3), Range(13, 23), False),
    (SpliceEdit(10, 0, 3), Range(10, 23), False),
    (SpliceEdit(15, 0, 3), Range(10, 23), False),
    (SpliceEdit(20, 0, 3), Range(10, 20), False),
    (SpliceEdit(25, 0, 3), Range(10, 20), False),

    # Deletions
    (SpliceEdit(0, 5, 0), Range(5, 15), False),
    (SpliceEdit(12, 3, 0), Range(10, 17), False),
    (SpliceEdit(5, 7, 0), Range(5, 13), False),
    (SpliceEdit(15, 10, 0), Range(10, 15), False),
    (SpliceEdit(10, 10, 0), Range(10, 10), True),
    (SpliceEdit(5, 20, 0), Range(5, 5), True),
    (SpliceEdit(20, 5, 0), Range(10, 20), False),

    # Replacements
    (SpliceEdit(15, 10, 4), Range(10, 15), False),
    (SpliceEdit(12, 3, 5), Range(10, 22), False),
    (SpliceEdit(5, 7, 2), Range(7, 15), False),
    (SpliceEdit(0, 2, 4), Range(12, 22), False)
])
def test_adjust_range(edit, exp_range, exp_collapsed):
    r, collapsed = adjust_range(Range(10, 20), edit)
    assert r == exp_range
    assert collapsed == exp_collapsed


def test_adjust_range_keeps_attributes():
    r = Range(10, 20, Orientation.MINUS, start_indefinite=True, end_indefinite=True)
    adjusted, _ = adjust_range(r, SpliceEdit(15, 0, 5))
    assert adjusted == Range(10, 25, Orientation.MINUS, start_indefinite=True, end_indefinite=True)


@pytest.mark.parametrize('pos', [10, 15, 20, 25])
def test_adjust_range_cursor_at_insertion(pos):

    # A point at the insertion position stays where it is
    r, collapsed = adjust_range(Range.point(pos), SpliceEdit.insertion(pos, 4))
    assert r == Range.point(pos)
    assert not collapsed


@pytest.mark.parametrize('span,edit,exp_span', [

    # Insertion inside, at the start boundary, before and at the end boundary
    ('230..247', SpliceEdit.insertion(231, 4), '230..251'),
    ('100..150', SpliceEdit.insertion(99, 3), '103..153'),
    ('10..30', SpliceEdit.insertion(10, 3), '10..33'),
    ('10..30', SpliceEdit.insertion(30, 3), '10..30'),
    ('10..20 + 40..60', SpliceEdit.insertion(30, 4), '10..20 + 44..64'),

    # Replacement within
    ('10..50', SpliceEdit(20, 5, 15), '10..60'),
    ('10..50', SpliceEdit(20, 10, 2), '10..42'),

    # Replacement before
    ('50..70', SpliceEdit(20, 10, 4), '44..64'),

    # Replacement across the start boundary
    ('25..45', SpliceEdit(20, 10, 4), '24..39'),

    # Replacement across the end boundary
    ('15..35', SpliceEdit(30, 20, 4), '15..30'),

    # Orientation and boundary flags are kept
    ('(<10..20) + [30..>40]', SpliceEdit.insertion(0, 5), '(<15..25) + [35..>45]')
])
def test_adjust_span(span, edit, exp_span):
    adj = adjust_span(parse_span(span), edit)
    assert str(adj.span) == exp_span
    assert adj.changed == (exp_span != span)
    assert not adj.degenerate


def test_adjust_span_contained_collapses():
    adj = adjust_span(parse_span('25..35'), SpliceEdit(20, 20, 3))
    assert adj.span == Span.point(20)
    assert adj.changed
    assert adj.degenerate


def test_adjust_span_all_ranges_collapse():
    adj = adjust_span(parse_span('(12..14) + (15..18)'), SpliceEdit(10, 10, 0))
    assert str(adj.span) == '(10)'
    assert adj.degenerate


def test_adjust_span_partial_collapse():
    adj = adjust_span(parse_span('10..12 + 30..40'), SpliceEdit(5, 10, 0))
    assert str(adj.span) == '5 + 20..30'
    assert adj.changed
    assert not adj.degenerate
    assert adj.collapsed == (0,)
    assert adj.is_partially_collapsed
    assert str(drop_collapsed(adj.span, adj.collapsed)) == '20..30'


@pytest.mark.parametrize('span,collapsed,exp_span', [
    ('10..20 + 30..40', (), '10..20 + 30..40'),
    ('5 + 20..30', (0,), '20..30'),
    ('5 + 20..30 + 5', (0, 2), '20..30'),
    ('5 + 5', (0, 1), '5 + 5')
])
def test_drop_collapsed(span, collapsed, exp_span):
    assert str(drop_collapsed(parse_span(span), collapsed)) == exp_span


def test_lift_span():
    adj = lift_span(parse_span('1..5 + 10..20 + 30..32'), [SpliceEdit(30, 2, 0), SpliceEdit(2, 3, 0)])
    assert str(adj.span) == '1..2 + 7..17 + 27'
    assert adj.changed
    assert not adj.degenerate
    assert adj.collapsed == (2,)


def test_lift_span_collapsed_by_different_edits():
    adj = lift_span(parse_span('2..4 + 8..10'), [SpliceEdit(8, 2, 0), SpliceEdit(2, 2, 0)])
    assert str(adj.span) == '2'
    assert adj.changed
    assert adj.degenerate
    assert adj.collapsed == (0,)


def test_lift_span_no_edits():
    span = parse_span('2..4')
    adj = lift_span(span, [])
    assert adj.span == span
    assert not adj.changed
    assert not adj.collapsed


def test_insert_shifts_following_ranges():
    n = 7
    p = 30
    span = parse_span('40..50 + 60..70')
    adj = adjust_span(span, SpliceEdit.insertion(p, n))
    for r, r_new in zip(span, adj.span):
        assert r_new.start == r.start + n
        assert r_new.end == r.end + n


def test_delete_insert_restores_unrelated_span():
    span = parse_span('50..60 + (70..80)')
    deleted = adjust_span(span, SpliceEdit(10, 10, 0)).span
    assert str(deleted) == '40..50 + (60..70)'
    assert adjust_span(deleted, SpliceEdit.insertion(10, 10)).span == span


@pytest.mark.parametrize('edit,exp_str', [
    (SpliceEdit(5, 0, 3), '5ins3'),
    (SpliceEdit(5, 5, 0), '5_10del'),
    (SpliceEdit(5, 5, 3), '5_10delins3')
])
def test_splice_edit_str(edit, exp_str):
    assert str(edit) == exp_str


@pytest.mark.parametrize('start,removed,inserted,valid', [
    (0, 0, 1, True),
    (-1, 0, 1, False),
    (0, -1, 1, False),
    (0, 1, -1, False)
])
def test_splice_edit_init(start, removed, inserted, valid):
    with nullcontext() if valid else pytest.raises(InvalidEdit):
        SpliceEdit(start, removed, inserted)


@pytest.mark.parametrize('edit,valid', [
    (SpliceEdit.insertion(10, 2), True),
    (SpliceEdit.insertion(11, 2), False),
    (SpliceEdit(5, 5, 0), True),
    (SpliceEdit(5, 6, 0), False)
])
def test_splice_edit_validate(edit, valid):
    with nullcontext() if valid else pytest.raises(InvalidEdit):
        edit.validate(10)


def test_get_deletion_edits():
    edits = get_deletion_edits([Range(2, 4), Range(8, 10), Range(5, 5)])
    assert edits == [SpliceEdit(8, 2, 0), SpliceEdit(2, 2, 0)]


@pytest.mark.parametrize('ranges', [
    [],
    [Range(5, 5)],
    [Range(2, 6), Range(4, 8)]
])
def test_get_deletion_edits_invalid(ranges):
    with pytest.raises(InvalidEdit):
        get_deletion_edits(ranges)


def test_get_deletion_edits_out_of_bounds():
    with pytest.raises(InvalidEdit):
        get_deletion_edits([Range(2, 4), Range(8, 12)], sequence_length=10)


def test_delete_ranges_multiple():
    spans = [parse_span('1..5 + 10..20'), parse_span('30..40')]
    adjustments = delete_ranges(spans, [Range(2, 7), Range(15, 24)])

    assert str(adjustments[0].span) == '1..2 + 5..10'
    assert str(adjustments[1].span) == '16..26'
    assert all(adj.changed for adj in adjustments)
    assert not any(adj.degenerate for adj in adjustments)


def test_delete_ranges_degenerate():
    spans = [parse_span('3..6'), parse_span('0..2')]
    adjustments = delete_ranges(spans, [Range(10, 12), Range(2, 8)])

    assert str(adjustments[0].span) == '2'
    assert adjustments[0].degenerate
    assert str(adjustments[1].span) == '0..2'
    assert not adjustments[1].changed


@pytest.mark.parametrize('ranges,exp_selection', [
    ([Range(3, 8)], [Range(3, 3)]),
    ([Range(5, 10), Range(15, 18)], None),
    ([Range(10, 15), Range(5, 10)], [Range(5, 5)]),
    ([Range(0, 5), Range(15, 20)], [Range(0, 0)]),
    ([Range(15, 20), Range(0, 5)], [Range(0, 0)]),
    ([Range(0, 5), Range(10, 15)], None),
    ([Range(0, 5), Range(8, 10), Range(15, 20)], None)
])
def test_get_post_delete_selection(ranges, exp_selection):
    assert get_post_delete_selection(ranges, 20) == exp_selection


def test_get_post_delete_selection_linear():
    assert get_post_delete_selection([Range(0, 5), Range(15, 20)], 20, circular=False) is None
    assert get_post_delete_selection([Range(0, 5), Range(5, 20)], 20, circular=False) == [Range(0, 0)]


def test_get_post_replace_selection():
    assert get_post_replace_selection(SpliceEdit(20, 10, 4)) == [Range(20, 24)]


def test_get_post_insert_selection():
    assert get_post_insert_selection(SpliceEdit.insertion(20, 4)) == [Range(24, 24)]
