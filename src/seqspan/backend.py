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

import abc
import logging
from typing import Callable, Optional

from pydantic import BaseModel, Field

from .utils import get_unique_id


class BackendMessage(BaseModel):
    id: str = Field(default_factory=get_unique_id)

    class Config:
        populate_by_name = True


class InsertMessage(BackendMessage):
    position: int = Field(ge=0)
    text: str = Field(min_length=1)


class DeleteMessage(BackendMessage):
    start: int = Field(ge=0)
    end: int = Field(ge=0)


class AnnotationMessage(BackendMessage):
    annotation_id: str = Field(alias='annotationId')
    caption: str = Field(default='')
    type: str = Field()
    span: str = Field()
    attributes: dict[str, str] = Field(default_factory=dict)


class AnnotationDeletedMessage(BackendMessage):
    annotation_id: str = Field(alias='annotationId')


AckCallback = Callable[[str], None]
ErrorCallback = Callable[[str, str], None]


class Backend(abc.ABC):
    """
    Channel forwarding confirmed edits to an external store

    Calls are fire-and-forget: the receiving side must be idempotent by
    message identifier, and acknowledgements or errors are reported
    asynchronously through the registered callbacks.
    """

    @abc.abstractmethod
    def insert(self, message: InsertMessage) -> None:
        pass

    @abc.abstractmethod
    def delete(self, message: DeleteMessage) -> None:
        pass

    @abc.abstractmethod
    def annotation_created(self, message: AnnotationMessage) -> None:
        pass

    @abc.abstractmethod
    def annotation_update(self, message: AnnotationMessage) -> None:
        pass

    @abc.abstractmethod
    def annotation_deleted(self, message: AnnotationDeletedMessage) -> None:
        pass

    def on_ack(self, callback: AckCallback) -> Optional[Callable[[], None]]:
        return None

    def on_error(self, callback: ErrorCallback) -> Optional[Callable[[], None]]:
        return None


class PendingEdits:
    """Identifiers of the messages sent and not yet acknowledged"""

    __slots__ = ['_pending']

    def __init__(self) -> None:
        self._pending: dict[str, BackendMessage] = {}

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, message_id: str) -> bool:
        return message_id in self._pending

    def add(self, message: BackendMessage) -> None:
        self._pending[message.id] = message

    def ack(self, message_id: str) -> None:
        if self._pending.pop(message_id, None) is None:
            logging.debug("Acknowledgement for unknown message '%s'." % message_id)

    def error(self, message_id: str, error: str) -> None:
        message = self._pending.pop(message_id, None)
        logging.warning("Backend failed to apply %s '%s': %s!" % (
            type(message).__name__ if message is not None else "message",
            message_id,
            error))

    @property
    def ids(self) -> list[str]:
        return list(self._pending.keys())
