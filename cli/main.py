"""CLI entry point."""

import os
import sys

from cli.context import build_context
from cli.repl import repl_loop
from common.config import Config
from common.constants import CONFIG_PATH
from common.logging_config import setup_logging

LOGGED_PACKAGES = ('cli', 'common', 'dashboard', 'mediaclient')


def main() -> None:
    """Entry point for CLI."""
    debug = '--debug' in sys.argv
    if debug:
        sys.argv.remove('--debug')
    log_level = 'DEBUG' if debug else os.getenv('LOG_LEVEL', 'INFO')

    config = Config(CONFIG_PATH)
    log_file = None if debug else config.get_log_file()

    for package in LOGGED_PACKAGES:
        setup_logging(package, log_level=log_level, log_file=log_file)
    logger = setup_logging('cli', log_level=log_level, log_file=log_file)

    if debug:
        logger.info("Debug logging enabled")

    logger.info(f"CLI starting [api_url={config.get_base_url()}]")
    ctx = build_context(config)
    try:
        repl_loop(ctx)
    except Exception as e:
        logger.error(f"CLI error: {e}", exc_info=True)
        raise
    finally:
        ctx.close()
        logger.info("CLI exiting")


if __name__ == "__main__":
    main()
