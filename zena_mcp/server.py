"""FastMCP server initialization for the ZenaManage planning core."""

import logging

from mcp.server.fastmcp import FastMCP

from zena_mcp.logging import configure_logging
from zena_mcp.settings import settings
from zena_mcp.workspace import Workspace

logger = logging.getLogger(__name__)

# Initialize the MCP server
mcp = FastMCP("zena_mcp")

_workspace: Workspace | None = None


def get_workspace() -> Workspace:
    """Return the process-wide workspace, building it on first use."""
    global _workspace
    if _workspace is None:
        _workspace = Workspace(settings)
        if settings.snapshot_path:
            _workspace.load_snapshot(settings.snapshot_path)
    return _workspace


def reset_workspace(workspace: Workspace | None = None) -> None:
    """Replace (or drop) the process-wide workspace."""
    global _workspace
    _workspace = workspace


def run() -> None:
    """Run the MCP server."""
    configure_logging(settings.log_level)
    logger.info("Starting zena_mcp server")
    mcp.run()


if __name__ == "__main__":
    run()
