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

import json

import pytest
from pydantic import ValidationError
from seqspan.config import EditorConfig
from seqspan.loaders.session import (
    DeleteStep,
    InsertStep,
    ReplaceStep,
    apply_edit_script,
    load_edit_script,
    load_session
)
from seqspan.loaders.utils import load_json


SESSION = {
    'sequence': 'atcgatcgatcgatcg',
    'annotations': [
        {'id': 'a', 'caption': 'first', 'type': 'CDS', 'span': '1..5 + 9..12'},
        {'id': 'b', 'span': '(12..16)', 'attributes': {'note': 'x'}}
    ],
    'selection': '2..4'
}

EDITS = [
    {'type': 'insert', 'position': 0, 'text': 'GG'},
    {'type': 'delete', 'selection': '4..6 + 10..12'},
    {'type': 'replace', 'selection': '0..2', 'text': 'TTT'}
]


def write_json(fp, o) -> str:
    fp.write_text(json.dumps(o))
    return str(fp)


def test_load_session(tmp_path):
    session = load_session(write_json(tmp_path / 'session.json', SESSION))

    assert session.sequence == 'ATCGATCGATCGATCG'
    assert [a.id for a in session.annotations] == ['a', 'b']
    assert session.get_annotation('a').caption == 'first'
    assert session.get_annotation('b').attributes == {'note': 'x'}
    assert str(session.selection) == '2..4'


def test_load_session_config(tmp_path):
    session = load_session(
        write_json(tmp_path / 'session.json', SESSION),
        config=EditorConfig(default_annotation_type='gene'))
    assert session.add_annotation('0..1').type == 'gene'


@pytest.mark.parametrize('o', [
    {'sequence': 'ACGT', 'annotations': [{'span': '0..10'}]},
    {'sequence': 'ACGT', 'annotations': [{'span': '1..'}]},
    {'sequence': 'ACGU'},
    {'sequence': 'ACGT', 'annotations': [{'caption': 'no span'}]}
])
def test_load_session_invalid(tmp_path, o):
    with pytest.raises(ValueError):
        load_session(write_json(tmp_path / 'session.json', o))


def test_load_edit_script(tmp_path):
    steps = load_edit_script(write_json(tmp_path / 'edits.json', EDITS))

    assert len(steps) == 3
    assert isinstance(steps[0], InsertStep)
    assert isinstance(steps[1], DeleteStep)
    assert isinstance(steps[2], ReplaceStep)
    assert steps[0].text == 'GG'


def test_load_edit_script_invalid(tmp_path):
    with pytest.raises(ValidationError):
        load_edit_script(write_json(tmp_path / 'edits.json', [{'type': 'move', 'position': 1}]))


def test_apply_edit_script(tmp_path):
    session = load_session(write_json(tmp_path / 'session.json', SESSION))
    steps = load_edit_script(write_json(tmp_path / 'edits.json', EDITS))
    results = apply_edit_script(session, steps)

    assert len(results) == 3
    assert session.sequence == 'TTTATATCGCGATCG'
    assert {a.id: str(a.span) for a in session.annotations} == {
        'a': '4..6 + 9..11',
        'b': '(11..15)'
    }
    assert str(session.selection) == '0..3'


def test_load_json_invalid(tmp_path):
    fp = tmp_path / 'x.json'
    fp.write_text('{')
    with pytest.raises(ValueError):
        load_json(str(fp))


def test_load_json_encoding(tmp_path):
    fp = tmp_path / 'x.json'
    fp.write_bytes(json.dumps({'caption': 'café'}, ensure_ascii=False).encode('utf-16'))
    assert load_json(str(fp)) == {'caption': 'café'}
