"""
Package Names MCP

Checks whether a package name is free on the npm registry and on GitHub, and
suggests alternatives when it is taken. Usable as a CLI or as an MCP server.
"""

__version__ = "0.1.0"


def main():
    """Main entry point for the CLI."""
    import sys

    # Handle server/version flags before importing heavy dependencies
    if "--version" in sys.argv[1:2] or "-V" in sys.argv[1:2]:
        print(f"package-names-mcp {__version__}")
        sys.exit(0)

    if "--mcp" in sys.argv[1:2]:
        from .server import mcp
        mcp.run()
        return

    from .cli import run
    sys.exit(run(sys.argv[1:]))
