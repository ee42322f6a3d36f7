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

class InvalidConfig(Exception):
    pass


class SpanParseError(ValueError):
    def __init__(self, text: str, reason: str, *args: object) -> None:
        self.text = text
        self.reason = reason
        super().__init__(self.msg, *args)

    @property
    def msg(self) -> str:
        return f"Invalid span '{self.text}': {self.reason}!"


class InvalidEdit(ValueError):
    pass


class SelectionError(ValueError):
    pass


class AnnotationNotFound(KeyError):
    def __init__(self, annotation_id: str, *args: object) -> None:
        self.annotation_id = annotation_id
        super().__init__(annotation_id, *args)

    @property
    def msg(self) -> str:
        return f"Annotation '{self.annotation_id}' not found!"
