"""BlueKit MCP Server - artifact and registry core package."""

# No imports at package level to avoid circular import issues
# Import modules directly where needed

__version__ = "0.1.0"
