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
import logging
from typing import Any

from pydantic import BaseModel, Field

from .constants import DEFAULT_ANNOTATION_TYPE, IUPAC_NTS
from .enums import InsertSelection
from .errors import InvalidConfig


class EditorConfig(BaseModel):

    # Topology
    circular: bool = Field(default=False)

    # Permissions
    readonly: bool = Field(default=False)

    # Sequence text
    alphabet: str = Field(default=IUPAC_NTS)

    # Defaults
    default_annotation_type: str = Field(alias='defaultAnnotationType', default=DEFAULT_ANNOTATION_TYPE)
    selection_on_insert: InsertSelection = Field(alias='selectionOnInsert', default=InsertSelection.CURSOR)

    class Config:
        populate_by_name = True

    def __init__(__pydantic_self__, **data: Any) -> None:
        super().__init__(**data)
        if not __pydantic_self__.is_valid():
            raise InvalidConfig()

    def write(self, fp: str) -> None:
        with open(fp, 'w') as fh:
            fh.write(self.model_dump_json(by_alias=True))

    def is_valid(self) -> bool:
        success: bool = True

        # Validate alphabet
        if not self.alphabet:
            logging.error("Invalid alphabet: empty!")
            success = False
        else:
            invalid = sorted(set(self.alphabet) - set(IUPAC_NTS))
            if invalid:
                logging.error(
                    "Invalid alphabet: unsupported symbols %s!" %
                    ', '.join(invalid))
                success = False

        # Validate default annotation type
        if not self.default_annotation_type.strip():
            logging.error("Invalid default annotation type: empty!")
            success = False

        return success


def load_config(fp: str) -> EditorConfig:
    with open(fp) as fh:
        try:
            config_dict = json.load(fh)
        except json.JSONDecodeError:
            raise InvalidConfig("not a JSON!")

    if not isinstance(config_dict, dict):
        raise InvalidConfig("not a JSON object!")

    return EditorConfig(**config_dict)
