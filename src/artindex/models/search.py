"""Query filters and result records for semantic search."""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class SearchFilters:
    """Metadata filters applied before scoring. All supplied filters are ANDed.

    platform matches source exactly, framework matches script type exactly,
    artist is a substring match. All comparisons ignore case.
    """

    platform: Optional[str] = None
    framework: Optional[str] = None
    artist: Optional[str] = None
    min_score: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "SearchFilters":
        if not data:
            return cls()
        min_score = data.get("min_score", data.get("minScore"))
        return cls(
            platform=data.get("platform") or None,
            framework=data.get("framework") or None,
            artist=data.get("artist") or None,
            min_score=float(min_score) if min_score is not None else None,
        )


@dataclass(frozen=True)
class SearchResult:
    project_id: str
    type: str
    source: str
    artist: str
    script_type: str
    score: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "projectId": self.project_id,
            "type": self.type,
            "source": self.source,
            "artist": self.artist,
            "scriptType": self.script_type,
        }
        if self.score is not None:
            data["score"] = self.score
        return data
