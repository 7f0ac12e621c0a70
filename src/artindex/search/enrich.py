"""Project lookup used to enrich search results with human-readable detail."""

import re
from typing import Any, Iterable, Optional

from artindex.models import Document, SearchResult

_NAME_RE = re.compile(r"^Project:\s*(.+?)\s*$", re.MULTILINE)
_DESCRIPTION_RE = re.compile(r"Description:\s*(.+)")

DESCRIPTION_CHARS = 100

PROJECT_LINKS = {
    "artblocks": "https://artblocks.io/collections/curated/projects/{}",
    "fxhash": "https://www.fxhash.xyz/generative/{}",
}


def extract_name(content: Optional[str]) -> Optional[str]:
    """Return the value of the "Project: ..." line, if any."""
    if not content:
        return None
    match = _NAME_RE.search(content)
    return match.group(1) if match else None


def extract_description(content: Optional[str], limit: int = DESCRIPTION_CHARS) -> str:
    """Return the first "Description: ..." line, cut to `limit` characters."""
    if not content:
        return ""
    match = _DESCRIPTION_RE.search(content)
    if not match:
        return ""
    text = match.group(1).strip()
    return text[:limit] + ("..." if len(text) > limit else "")


def project_link(source: Optional[str], project_number: Any) -> Optional[str]:
    template = PROJECT_LINKS.get((source or "").lower())
    if template is None or project_number in (None, ""):
        return None
    return template.format(project_number)


class ProjectCatalog:
    """In-memory lookup of corpus documents by id."""

    def __init__(self, documents: Iterable[Document]):
        self._documents: dict[str, Document] = {}
        for doc in documents:
            self._documents.setdefault(doc.id, doc)

    def __len__(self) -> int:
        return len(self._documents)

    def get(self, project_id: str) -> Optional[Document]:
        return self._documents.get(project_id)

    def enrich(self, result: SearchResult) -> dict[str, Any]:
        """Merge a search result with the name, description, tags and link of its project."""
        data = result.to_dict()
        doc = self.get(result.project_id)
        if doc is None:
            data.update(
                name="Unknown Project", description="", aesthetics=[], patterns=[], link=None
            )
            return data

        number = doc.metadata.project_id
        if number is None:
            number = re.sub(r"\D+", "", result.project_id) or None

        data.update(
            name=extract_name(doc.content) or result.project_id,
            description=extract_description(doc.content),
            aesthetics=list(doc.metadata.aesthetics),
            patterns=list(doc.metadata.patterns),
            link=project_link(result.source or doc.metadata.source, number),
        )
        return data

    def search_by_pattern(self, pattern: str, limit: int = 10) -> dict[str, Any]:
        """Find projects whose pattern tags contain `pattern` (case-insensitive).

        Results are deduplicated by source and project number, in corpus order.
        """
        needle = pattern.lower()
        matches = [
            doc
            for doc in self._documents.values()
            if any(needle in p.lower() for p in doc.metadata.patterns)
        ]

        seen: set[str] = set()
        results = []
        for doc in matches:
            key = f"{doc.metadata.source}_{doc.metadata.project_id or doc.id}"
            if key in seen:
                continue
            seen.add(key)
            results.append(
                {
                    "projectId": doc.metadata.project_id or doc.id,
                    "name": extract_name(doc.content),
                    "artist": doc.metadata.artist,
                    "platform": doc.metadata.source,
                    "framework": doc.metadata.script_type,
                    "patterns": list(doc.metadata.patterns),
                    "aesthetics": list(doc.metadata.aesthetics),
                }
            )
            if len(results) >= limit:
                break

        return {
            "pattern": pattern,
            "resultCount": len(results),
            "totalMatches": len(matches),
            "results": results,
        }
