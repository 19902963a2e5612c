"""MCP tools for reading passages."""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from bible_search.engine import ScriptureEngine


def register(mcp: FastMCP, engine: ScriptureEngine) -> None:
    @mcp.tool()
    def get_passage(reference: str, annotated: bool = False) -> dict:
        """Get the verses for a Bible reference.

        Accepts book names and common abbreviations, e.g. "Genesis 1",
        "1 Timothy 3:16-18", "jhn.1.1". Each verse carries one "text": the
        plain rendering, or with annotated=true the rendering that wraps words
        supplied by the translators (italics in print) in <em> tags.

        Args:
            reference: The reference to look up
            annotated: Return the annotated rendering instead of plain text
        """
        passage = engine.get_passage(reference, annotated=annotated)
        if passage is None:
            return {"error": f"'{reference}' is not a valid Bible reference."}
        return passage.model_dump()

    @mcp.tool()
    def list_books() -> list[dict]:
        """List all books of the corpus with their chapter counts."""
        return [b.model_dump() for b in engine.list_books()]
