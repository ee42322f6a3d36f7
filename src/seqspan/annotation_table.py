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

from typing import Iterable

import pandas as pd

from .annotation import Annotation
from .constants import ANNOTATION_TABLE_COLUMNS


def get_annotation_table(annotations: Iterable[Annotation]) -> pd.DataFrame:
    """One row per annotation: identifier, labels, span notation and bounds"""

    rows = [
        (
            a.id,
            a.caption,
            a.type,
            str(a.span),
            a.span.start,
            a.span.end,
            a.length,
            a.orientation.value if a.orientation is not None else None
        )
        for a in annotations
    ]

    df = pd.DataFrame.from_records(rows, columns=ANNOTATION_TABLE_COLUMNS)
    df['orientation'] = df['orientation'].astype('Int8')
    return df


def write_annotation_table(annotations: Iterable[Annotation], fp: str) -> None:
    get_annotation_table(annotations).to_csv(fp, index=False)
