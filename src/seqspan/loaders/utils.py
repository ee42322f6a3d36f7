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

from charset_normalizer import detect


def detect_encoding(fp: str) -> str | None:
    with open(fp, 'rb') as rfh:
        encoding = detect(rfh.read(10000))['encoding']
    logging.debug("File '%s' encoding: %s." % (fp, encoding))
    return encoding


def load_json(fp: str) -> Any:
    """Load a JSON document in whatever text encoding it was saved"""

    with open(fp, encoding=detect_encoding(fp)) as fh:
        try:
            return json.load(fh)
        except json.JSONDecodeError as ex:
            raise ValueError(f"Invalid JSON file '{fp}': {ex.msg} at line {ex.lineno}!") from ex
