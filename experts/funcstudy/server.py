"""FuncStudy — Math Expert MCP Server.

Run:   uv run python -m experts.funcstudy.server
Test:  uv run mcp dev experts/funcstudy/server.py
"""

import logging

from mcp.server.fastmcp import FastMCP
from experts.funcstudy.config import SERVER_INSTRUCTIONS, SERVER_NAME, SETTINGS
from experts.funcstudy.logs import configure_logging
from experts.funcstudy.tools.algebra import math_tool
from experts.funcstudy.tools.calculus import calculus_tool

mcp = FastMCP(name=SERVER_NAME, instructions=SERVER_INSTRUCTIONS)

# Register the 2 tools
mcp.tool()(calculus_tool)
mcp.tool()(math_tool)

if __name__ == "__main__":
    configure_logging(SETTINGS.log_level)
    logging.getLogger(__name__).info("%s starting (stdio)", SERVER_NAME)
    mcp.run()
