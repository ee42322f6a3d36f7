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

from ..fenced_range import Range
from ..utils import is_nucleotide_seq, reverse_complement


class SeqStr(str):
    """Nucleotide sequence text (IUPAC codes) with fenced-coordinate edits"""

    def __init__(self, s: str) -> None:
        if not is_nucleotide_seq(s):
            raise ValueError(f"Invalid nucleotide sequence: {s}!")
        super().__init__()

    @classmethod
    def parse(cls, s: str | None) -> SeqStr:
        return cls(s.upper()) if s else cls.empty()

    @classmethod
    def empty(cls) -> SeqStr:
        return cls('')

    def __add__(self, other) -> SeqStr:
        return SeqStr(str(self) + str(other))

    def substr(self, r: Range) -> SeqStr:
        assert r.end <= len(self)
        return SeqStr(self[r.to_slice()])

    def insert_substr(self, pos: int, alt: str) -> SeqStr:
        assert 0 <= pos <= len(self)
        return SeqStr(f"{self[:pos]}{alt}{self[pos:]}")

    def delete_substr(self, r: Range) -> SeqStr:
        assert r.end <= len(self)
        return SeqStr(f"{self[:r.start]}{self[r.end:]}")

    def replace_substr(self, r: Range, alt: str) -> SeqStr:
        assert r.end <= len(self)
        return SeqStr(f"{self[:r.start]}{alt}{self[r.end:]}")

    def revcomp(self) -> SeqStr:
        return SeqStr(reverse_complement(self))
