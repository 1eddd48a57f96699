"""Command-line interface and MCP server for prpilot."""
