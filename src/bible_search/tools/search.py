"""MCP tools for verse search."""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from bible_search.engine import ScriptureEngine


def register(mcp: FastMCP, engine: ScriptureEngine) -> None:
    @mcp.tool()
    def search_verses(query: str, limit: int | None = None) -> list[dict]:
        """Search the King James Bible by reference or by words.

        If the query is a reference ("John 3:16", "1 Tim 2", "ps.23") the
        matching verses are returned in reading order. Otherwise the query is
        a full-text search: bare words must all appear in a verse, and
        "quoted phrases" must appear verbatim. Results are ranked by
        relevance and capped at the server's result limit.

        Args:
            query: A reference or search words
            limit: Max results to return (default and ceiling: the server's
                configured result limit)
        """
        return [m.model_dump() for m in engine.search(query, limit)]

    @mcp.tool()
    def get_sitemap() -> list[str]:
        """List the path of every book and chapter in the corpus."""
        return engine.sitemap()
