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

from enum import Enum, IntEnum


class Orientation(IntEnum):
    MINUS = -1
    NONE = 0
    PLUS = 1

    @property
    def flipped(self):
        return Orientation(-self.value)


class EditType(str, Enum):
    INSERT = 'insert'
    DELETE = 'delete'
    REPLACE = 'replace'


class PasteMode(str, Enum):
    DEFAULT = 'default'
    INCLUDE = 'include'


class MergeDirection(str, Enum):
    LEFT = 'left'
    RIGHT = 'right'


class InsertSelection(str, Enum):
    CURSOR = 'cursor'
    INSERTED = 'inserted'
