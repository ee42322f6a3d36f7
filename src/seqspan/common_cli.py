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

from functools import wraps
import logging
import sys
from typing import Optional

import click

from .config import EditorConfig, load_config
from .errors import InvalidConfig


existing_file = click.Path(exists=True, file_okay=True, dir_okay=False)


def set_logger(ctx: click.Context, param: click.Parameter, value: str) -> None:
    logging.basicConfig(level=logging._nameToLevel[value.upper()])


def load_config_or_exit(fp: Optional[str]) -> EditorConfig:
    if not fp:
        logging.debug("Configuration not specified, the default one will be used.")
        return EditorConfig()

    try:
        return load_config(fp)
    except InvalidConfig as ex:
        logging.critical("Invalid configuration%s!" % (' ' + ex.args[0] if ex.args else ''))
        sys.exit(1)
    except ValueError as ex:
        logging.critical(ex)
        logging.critical("Invalid configuration!")
        sys.exit(1)


log_option = click.option(
    '--log',
    default='WARNING',
    type=click.Choice(list(logging._nameToLevel.keys()), case_sensitive=False),
    callback=set_logger,
    expose_value=False,
    help="Logging level")


# See discussion: https://github.com/pallets/click/issues/108
def common_params(f):
    @click.option('-c', '--config', 'config_fp', type=existing_file, help="Configuration file path")
    @log_option
    @wraps(f)
    def wrapper(*args, **kwargs):
        kwargs['config'] = load_config_or_exit(kwargs.pop('config_fp', None))

        try:
            return f(*args, **kwargs)
        except (PermissionError, FileNotFoundError) as ex:
            logging.critical(ex)
            sys.exit(1)

    return wrapper
