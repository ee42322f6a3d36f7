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

import logging

from seqspan.backend import (
    AnnotationDeletedMessage,
    AnnotationMessage,
    DeleteMessage,
    InsertMessage,
    PendingEdits
)


def test_message_ids():
    a = InsertMessage(position=4, text='GGG')
    b = InsertMessage(position=4, text='GGG')
    assert a.id != b.id
    assert DeleteMessage(id='x', start=1, end=2).id == 'x'


def test_annotation_message_alias():
    m = AnnotationMessage(annotationId='a1', type='gene', span='1..2')
    assert m.annotation_id == 'a1'
    assert m.model_dump(by_alias=True)['annotationId'] == 'a1'
    assert AnnotationDeletedMessage(annotation_id='a1').annotation_id == 'a1'


def test_pending_edits(caplog):
    pending = PendingEdits()
    a = InsertMessage(position=0, text='A')
    b = DeleteMessage(start=0, end=1)

    pending.add(a)
    pending.add(b)
    assert len(pending) == 2
    assert a.id in pending

    pending.ack(a.id)
    assert pending.ids == [b.id]

    # Unknown acknowledgements are ignored
    pending.ack('unknown')
    assert len(pending) == 1

    with caplog.at_level(logging.WARNING):
        pending.error(b.id, "timeout")
    assert len(pending) == 0
    assert "DeleteMessage" in caplog.text
    assert "timeout" in caplog.text
