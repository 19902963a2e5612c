"""MCP Server exposing verse lookup and search as tools."""

from __future__ import annotations

import argparse
import logging

from mcp.server.fastmcp import FastMCP

from bible_search.engine import ScriptureEngine
from bible_search.tools import passage, search

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def build_server(engine: ScriptureEngine) -> FastMCP:
    mcp = FastMCP("bible-search")
    search.register(mcp, engine)
    passage.register(mcp, engine)
    return mcp


def main():
    """Compile the corpus, then run the MCP server."""
    parser = argparse.ArgumentParser(description="Bible Search MCP Server")
    parser.add_argument(
        "--corpus",
        metavar="PATH",
        help="Word corpus file (default: $CORPUS_PATH)",
    )
    transports = parser.add_mutually_exclusive_group()
    transports.add_argument(
        "--sse", type=int, metavar="PORT", help="Serve over SSE on PORT"
    )
    transports.add_argument(
        "--http", type=int, metavar="PORT", help="Serve over streamable HTTP on PORT"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.sse:
        transport, port = "sse", args.sse
    elif args.http:
        transport, port = "streamable-http", args.http
    else:
        transport, port = "stdio", None

    # Compilation errors are fatal: nothing is served from a partial index
    engine = ScriptureEngine.load(args.corpus)
    mcp = build_server(engine)

    logger.info("Starting Bible Search MCP server (transport: %s)...", transport)
    if port is not None:
        mcp.settings.host = "0.0.0.0"
        mcp.settings.port = port
    mcp.run(transport=transport)


if __name__ == "__main__":
    main()
