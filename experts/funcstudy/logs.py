"""Console logging for the FuncStudy entry points.

The MCP server and the Gradio UI each call configure_logging once at start-up.
Modules log through logging.getLogger(__name__).
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

# Third-party loggers that are chatty at INFO while serving the UI.
QUIET_LOGGERS = ("httpx", "httpcore", "urllib3", "asyncio")


def configure_logging(level: int = logging.INFO, stderr: bool = True) -> None:
    # stdout carries the MCP stdio transport.
    handler = RichHandler(
        console=Console(stderr=stderr),
        rich_tracebacks=True,
        show_path=level <= logging.DEBUG,
        markup=False,
    )
    logging.basicConfig(level=level, format="%(name)s: %(message)s",
                        datefmt="[%X]", handlers=[handler], force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
