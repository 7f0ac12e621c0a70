"""Tool handlers that report failures as error objects instead of raising."""

import logging
from pathlib import Path
from typing import Any, Optional

from artindex.errors import ArtIndexError, CorpusError
from artindex.loaders import get_loader
from artindex.search import ProjectCatalog, SearchEngine

logger = logging.getLogger(__name__)

MAX_SEARCH_RESULTS = 20


class ProjectTools:
    """Search tools backed by one engine and a lazily loaded project catalog."""

    def __init__(self, engine: SearchEngine, documents_path: Path):
        self.engine = engine
        self.documents_path = Path(documents_path)
        self._catalog: Optional[ProjectCatalog] = None

    def catalog(self) -> ProjectCatalog:
        """Load the corpus once for enrichment and pattern lookups.

        Raises:
            CorpusError: if the corpus cannot be read
        """
        if self._catalog is None:
            loader = get_loader(self.documents_path)
            if loader is None:
                raise CorpusError(f"Unsupported corpus format: {self.documents_path}")
            documents = loader.load(self.documents_path)
            self._catalog = ProjectCatalog(documents)
            logger.info(f"Loaded {len(self._catalog)} project documents")
        return self._catalog

    def search_projects(
        self,
        query: str,
        limit: int = 5,
        platform: Optional[str] = None,
        framework: Optional[str] = None,
        artist: Optional[str] = None,
    ) -> dict[str, Any]:
        if not query or not query.strip():
            return {"error": "Query is required"}

        filters = {"platform": platform, "framework": framework, "artist": artist}
        try:
            results = self.engine.search(
                query,
                top_k=max(1, min(limit, MAX_SEARCH_RESULTS)),
                filters=filters,
                include_scores=True,
            )
        except ArtIndexError as e:
            logger.error(f"Search error: {e}")
            return {"error": str(e), "hint": e.hint}

        if not results:
            return {
                "query": query,
                "results": [],
                "message": "No matching projects found. Try a different query or remove filters.",
            }

        try:
            catalog = self.catalog()
            enriched = [catalog.enrich(r) for r in results]
        except CorpusError as e:
            logger.warning(f"Results not enriched: {e}")
            enriched = [r.to_dict() for r in results]

        return {"query": query, "resultCount": len(enriched), "results": enriched}

    def search_by_pattern(self, pattern: str, limit: int = 10) -> dict[str, Any]:
        if not pattern or not pattern.strip():
            return {"error": "Pattern is required"}

        try:
            catalog = self.catalog()
        except CorpusError as e:
            logger.error(f"Pattern search error: {e}")
            return {"error": "Project documents not loaded", "hint": e.hint}

        return catalog.search_by_pattern(pattern.strip(), limit=limit)

    def index_stats(self) -> dict[str, Any]:
        try:
            return self.engine.get_index_stats()
        except ArtIndexError as e:
            return {"error": str(e), "hint": e.hint}
