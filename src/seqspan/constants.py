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

# Separator between the ranges of a joined span
SPAN_SEPARATOR = ' + '

# Selection token prefix referring to an annotation by identifier
ANNOTATION_ID_PREFIX = 'a:'

# Span notation wrappers (opening to closing)
MINUS_STRAND_BRACKETS = ('(', ')')
UNORIENTED_BRACKETS = ('[', ']')

# Indefinite boundary markers
INDEFINITE_START = '<'
INDEFINITE_END = '>'

# IUPAC nucleotide codes accepted in sequence text
IUPAC_NTS = 'ACGTNRYSWKMBDHV'
IUPAC_COMPLEMENTS = 'TGCANYRSWMKVHDB'

# Default parameters
DEFAULT_ANNOTATION_TYPE = 'misc_feature'

# Output annotation table
OUTPUT_ANNOTATIONS_FILE_NAME = 'annotations.csv'
ANNOTATION_TABLE_COLUMNS = [
    'id',
    'caption',
    'type',
    'span',
    'start',
    'end',
    'length',
    'orientation'
]
