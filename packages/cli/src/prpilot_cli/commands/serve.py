"""serve command — run the MCP server on stdio."""

from __future__ import annotations

import logging
import sys

import click


@click.command("serve")
@click.option("--root", type=click.Path(exists=True, file_okay=False), default=None, help="Repository root. Defaults to cwd.")
def serve_cmd(root: str | None):
    """Serve the prpilot tools to MCP clients over stdin/stdout.

    \b
    Example client entry:
      {"prpilot": {"command": "prpilot", "args": ["serve"]}}
    """
    from pathlib import Path

    from prpilot_cli.mcp_server import create_server

    # stdout carries the protocol; everything else goes to stderr
    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")

    server = create_server(Path(root) if root else None)
    logging.getLogger(__name__).info("Starting prpilot MCP server (stdio)")
    server.run()
