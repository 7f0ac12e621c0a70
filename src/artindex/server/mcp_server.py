"""FastMCP server exposing project search tools."""

import json
from typing import Optional

from mcp.server.fastmcp import FastMCP

from artindex.config import Settings
from artindex.embedders import SentenceTransformerEmbedder
from artindex.search import IndexHandle, SearchEngine
from artindex.server.tools import ProjectTools
from artindex.storage import VectorStore


def create_mcp_server(settings: Settings, tools: Optional[ProjectTools] = None) -> FastMCP:
    """Create an MCP server over the configured index.

    The index and the embedding model are loaded on the first search and
    kept for the lifetime of the server.

    Args:
        settings: Paths and defaults for the index, corpus and model
        tools: Pre-built tool handlers (used by tests)

    Returns:
        Configured FastMCP server instance
    """
    mcp = FastMCP(
        name="artindex",
    )

    if tools is None:
        embedder = SentenceTransformerEmbedder(settings.model_name, settings.cache_dir)
        engine = SearchEngine(
            IndexHandle(VectorStore(settings.index_dir)),
            embedder,
            min_score=settings.min_score,
        )
        tools = ProjectTools(engine, settings.documents_path)

    @mcp.tool()
    def search_projects(
        query: str,
        limit: int = 5,
        platform: str | None = None,
        framework: str | None = None,
    ) -> str:
        """Semantic search across generative art projects.

        Finds projects by concept rather than keyword: "organic flowing
        shapes" can match a flow-field project that never uses those words.

        Args:
            query: Natural language description of what you're looking for
            limit: Maximum number of results (default: 5, max: 20)
            platform: Only return projects from this platform (artblocks, fxhash)
            framework: Only return projects using this framework (p5js, threejs, js, regl, tone)

        Returns:
            JSON object with ranked, one-per-project results
        """
        return json.dumps(
            tools.search_projects(query, limit=limit, platform=platform, framework=framework),
            indent=2,
        )

    @mcp.tool()
    def search_by_pattern(pattern: str, limit: int = 10) -> str:
        """Find projects tagged with a code pattern (e.g. "perlin_noise").

        Args:
            pattern: Pattern name or fragment, matched case-insensitively
            limit: Maximum number of results (default: 10)

        Returns:
            JSON object with matching projects
        """
        return json.dumps(tools.search_by_pattern(pattern, limit=limit), indent=2)

    @mcp.tool()
    def index_stats() -> str:
        """Report the embedding model, dimensions and size of the search index."""
        return json.dumps(tools.index_stats(), indent=2)

    return mcp
