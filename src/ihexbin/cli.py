# Copyright (c) 2026, Andrea Zoppi
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# 1. Redistributions of source code must retain the above copyright notice,
#    this list of conditions and the following disclaimer.
#
# 2. Redistributions in binary form must reproduce the above copyright
#    notice, this list of conditions and the following disclaimer in the
#    documentation and/or other materials provided with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
# CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
# SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
# INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
# CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
# ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

"""
Module that contains the command line app.

Why does this file exist, and why not put this in __main__?

  You might be tempted to import things from __main__ later, but that will cause
  problems: the code will get executed twice:

  - When you run `python -m ihexbin` python will execute
    ``__main__.py`` as a script. That means there won't be any
    ``ihexbin.__main__`` in ``sys.modules``.
  - When you import __main__ it will get executed again (as a module) because
    there's no ``ihexbin.__main__`` in ``sys.modules``.

  Also see (1) from https://click.palletsprojects.com/en/stable/setuptools/#setuptools-integration
"""

import logging
from typing import Optional
from typing import Sequence

import click

from . import __version__
from .base import convert
from .errors import IhexError

_logger = logging.getLogger(__name__)

EXIT_FORMAT_ERROR: int = 1
r"""Exit status for invalid Intel HEX input."""

EXIT_IO_ERROR: int = 3
r"""Exit status for input/output failures."""

USAGE: str = (
    'usage:\n'
    '    hex2bin <hex> <bin>'
)

LOG_LEVELS: Sequence[int] = (logging.WARNING, logging.INFO, logging.DEBUG)


def print_version(ctx, _, value):

    if not value or ctx.resilient_parsing:
        return

    click.echo(f'hex2bin from Python ihexbin {__version__!s}')
    ctx.exit()


def setup_logging(verbose: int) -> None:

    level = LOG_LEVELS[min(verbose, len(LOG_LEVELS) - 1)]
    logging.basicConfig(level=level, format='%(levelname)s:%(name)s: %(message)s')


def path_or_none(path: str) -> Optional[str]:

    return None if path == '-' else path


# ============================================================================

@click.command()
@click.option('--version', is_flag=True, is_eager=True, expose_value=False,
              callback=print_version, help="""
    Prints the package version and exits.
""")
@click.option('-v', '--verbose', count=True, help="""
    Increases logging verbosity; repeat for debug messages.
""")
@click.argument('paths', nargs=-1, metavar='INFILE OUTFILE')
@click.pass_context
def main(
    ctx: click.Context,
    verbose: int,
    paths: Sequence[str],
) -> None:
    r"""Converts an Intel HEX file into a framed binary file.

    ``INFILE`` is the path of the input Intel HEX file.
    Set to ``-`` to read from standard input.

    ``OUTFILE`` is the path of the output binary file.
    Set to ``-`` to write to standard output.
    It is written only if the whole input is valid.
    """

    if len(paths) != 2:
        click.echo(USAGE)
        return

    setup_logging(verbose)
    infile, outfile = paths

    try:
        convert(path_or_none(infile), path_or_none(outfile))

    except IhexError as exc:
        _logger.error('invalid Intel HEX file %s: %s', infile, exc)
        ctx.exit(EXIT_FORMAT_ERROR)

    except OSError as exc:
        _logger.error('cannot convert %s to %s: %s', infile, outfile, exc)
        ctx.exit(EXIT_IO_ERROR)
