"""CLI entry point for binview. Uses Click for argument parsing."""

from __future__ import annotations

import logging
import sys

import click

from binview.app import Viewer
from binview.config import load_config
from binview.errors import BinviewError
from binview.source import load_records, open_inputs
from binview.terminal import ProcessTerminal

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _setup_logging(level: str, log_file: str | None) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        filename=log_file,
    )


@click.command()
@click.argument("files", nargs=-1, type=click.Path(dir_okay=False, allow_dash=True))
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="warning",
    help="Logging level",
)
@click.option("--log-file", default=None, help="Write log messages to this file instead of stderr")
@click.version_option(package_name="binview")
def main(files, log_level, log_file):
    """View FILES (or stdin) as an interactive hex dump.

    Move with the arrow keys, hjkl or Emacs control keys; 0/$ jump to the
    start/end of a row, < and > to the first/last row, ctrl-l redraws and
    q asks to quit.
    """
    _setup_logging(log_level, log_file)
    config = load_config()

    try:
        with open_inputs(files) as stream:
            records = load_records(stream)
        terminal = ProcessTerminal(
            tty_path=config.tty_path,
            key_timeout=config.key_timeout,
            write_log_path=config.write_log,
        )
        Viewer(terminal, records, theme=config.theme).run()
    except BinviewError as e:
        logger.debug("fatal error", exc_info=True)
        click.echo(str(e), err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
