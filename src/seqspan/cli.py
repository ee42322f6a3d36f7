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

import logging
import os
import sys
from typing import Optional

import click

from . import __version__
from .annotation_table import write_annotation_table
from .common_cli import common_params, existing_file, log_option
from .config import EditorConfig
from .constants import OUTPUT_ANNOTATIONS_FILE_NAME
from .errors import AnnotationNotFound, InvalidEdit, SelectionError, SpanParseError
from .loaders.session import apply_edit_script, load_edit_script, load_session
from .span import parse_span


@click.group()
@click.version_option(__version__)
def main():
    """DNA sequence coordinates and edits"""
    pass


@main.command()
@click.argument('span_text', metavar='SPAN')
@log_option
@click.pass_context
def span(ctx: click.Context, span_text: str):
    """Normalise a span and print its bounds and length"""

    try:
        s = parse_span(span_text)
    except SpanParseError as ex:
        logging.critical(ex.msg)
        ctx.exit(1)

    orientation = s.orientation
    click.echo(str(s))
    click.echo(f"bounds\t{s.start}\t{s.end}")
    click.echo(f"length\t{s.total_length}")
    click.echo(f"ranges\t{s.range_count}")
    click.echo(f"orientation\t{orientation.value if orientation is not None else 'mixed'}")


@main.command()
@click.argument('session_fp', type=existing_file, metavar='SESSION')
@click.argument('edits_fp', type=existing_file, metavar='EDITS')
@click.option('-o', '--output', 'output_fp', type=click.Path(dir_okay=False), help="Output annotation table file path")
@click.option('--sequence', 'sequence_fp', type=click.Path(dir_okay=False), help="Output sequence file path")
@common_params
def apply(
    session_fp: str,
    edits_fp: str,
    output_fp: Optional[str],
    sequence_fp: Optional[str],
    config: EditorConfig
):
    """Replay a script of edits on a session"""

    try:
        session = load_session(session_fp, config=config)
        steps = load_edit_script(edits_fp)
    except ValueError as ex:
        logging.critical(ex)
        logging.critical("Failed to load the session!")
        sys.exit(1)

    logging.info("Applying %d edits..." % len(steps))
    try:
        apply_edit_script(session, steps)
    except (InvalidEdit, SelectionError, SpanParseError) as ex:
        logging.critical(ex)
        logging.critical("Failed to apply the edits!")
        sys.exit(1)
    except AnnotationNotFound as ex:
        logging.critical(ex.msg)
        sys.exit(1)

    fp = output_fp or os.path.join(os.getcwd(), OUTPUT_ANNOTATIONS_FILE_NAME)
    write_annotation_table(session.annotations, fp)
    logging.info("Annotations written to '%s'." % fp)

    if sequence_fp:
        with open(sequence_fp, 'w') as fh:
            fh.write(session.sequence)
            fh.write('\n')

    selection = session.selection
    click.echo(str(selection) if selection.is_selected else '')
