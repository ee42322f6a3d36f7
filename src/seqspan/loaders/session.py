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
from typing import Optional, Union

from pydantic import BaseModel, Field
from typing_extensions import Annotated, Literal

from ..annotation import Annotation
from ..config import EditorConfig
from ..editor import EditResult, EditorSession
from ..enums import EditType
from ..span import parse_span
from .utils import load_json


class SessionAnnotation(BaseModel):
    id: Optional[str] = Field(default=None)
    caption: str = Field(default='')
    type: Optional[str] = Field(default=None)
    span: str = Field()
    attributes: dict[str, str] = Field(default_factory=dict)

    def to_annotation(self) -> Annotation:
        return Annotation.create(
            parse_span(self.span),
            id=self.id,
            caption=self.caption,
            type=self.type,
            attributes=self.attributes)


class SessionFile(BaseModel):
    sequence: str = Field(default='')
    annotations: list[SessionAnnotation] = Field(default_factory=list)
    selection: Optional[str] = Field(default=None)


class InsertStep(BaseModel):
    type: Literal[EditType.INSERT]
    position: int = Field()
    text: str = Field()


class DeleteStep(BaseModel):
    type: Literal[EditType.DELETE]
    selection: str = Field()


class ReplaceStep(BaseModel):
    type: Literal[EditType.REPLACE]
    selection: str = Field()
    text: str = Field()


EditStep = Annotated[Union[InsertStep, DeleteStep, ReplaceStep], Field(discriminator='type')]


class EditScript(BaseModel):
    edits: list[EditStep]


def load_session(fp: str, config: EditorConfig | None = None) -> EditorSession:
    session_file = SessionFile.model_validate(load_json(fp))

    session = EditorSession(
        session_file.sequence,
        annotations=[a.to_annotation() for a in session_file.annotations],
        config=config)
    if session_file.selection:
        session.select(session_file.selection)

    logging.info("Session loaded: %d bases, %d annotations." % (
        len(session), len(session.annotations)))
    return session


def load_edit_script(fp: str) -> list[EditStep]:
    o = load_json(fp)
    return EditScript.model_validate({
        'edits': o
    }).edits


def apply_edit_step(session: EditorSession, step: EditStep) -> EditResult:
    match step:
        case InsertStep():
            return session.insert(step.position, step.text)
        case DeleteStep():
            session.select(step.selection)
            return session.delete_selection()
        case ReplaceStep():
            session.select(step.selection)
            return session.replace_selection(step.text)
    raise TypeError("Invalid edit step!")


def apply_edit_script(session: EditorSession, steps: list[EditStep]) -> list[EditResult]:
    results: list[EditResult] = []
    for i, step in enumerate(steps):
        result = apply_edit_step(session, step)
        logging.debug("Edit %d applied: %s." % (i, ', '.join(str(e) for e in result.events)))
        results.append(result)
    return results
