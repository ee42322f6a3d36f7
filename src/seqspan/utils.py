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

import re
import uuid

from .constants import IUPAC_COMPLEMENTS, IUPAC_NTS

nt_re = re.compile(f'^[{IUPAC_NTS}]*$')
nt_filter_re = re.compile(f'[^{IUPAC_NTS}]')
nt_complement_tr_table = str.maketrans(IUPAC_NTS, IUPAC_COMPLEMENTS)


def is_nucleotide_seq(s: str) -> bool:
    return nt_re.match(s) is not None


def filter_nucleotides(s: str, alphabet: str | None = None) -> str:
    """Upper-case a text and drop any character outside the alphabet (IUPAC nucleotide codes by default)"""

    if alphabet is None:
        return nt_filter_re.sub('', s.upper())
    return ''.join(c for c in s.upper() if c in alphabet)


def reverse_complement(seq: str) -> str:
    return seq[::-1].translate(nt_complement_tr_table)


def get_unique_id(prefix: str = '') -> str:
    return f"{prefix}{uuid.uuid4().hex}"


def has_duplicates(items: list) -> bool:
    return len(set(items)) != len(items)
