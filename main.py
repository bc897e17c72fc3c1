"""MCP server exposing BlueKit artifact and registry tools."""

from bluekit.server import main


if __name__ == "__main__":
    main()
