"""Core data models for corpus documents and chunks."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

ProjectId = Union[str, int]


def _string_list(value: Any) -> tuple[str, ...]:
    """Coerce a loosely-typed tag field into a tuple of non-empty strings."""
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(item) for item in value if item is not None and str(item) != "")


def _text(value: Any, default: str) -> str:
    if value is None or value == "":
        return default
    return str(value)


@dataclass(frozen=True)
class ProjectMetadata:
    """Descriptive fields attached to a project document.

    Every field is optional in the corpus; missing values fall back to:
    source="unknown", project_id=None, artist="Unknown Artist",
    script_type="unknown", patterns=(), aesthetics=().
    """

    source: str = "unknown"
    project_id: Optional[ProjectId] = None
    artist: str = "Unknown Artist"
    script_type: str = "unknown"
    patterns: tuple[str, ...] = ()
    aesthetics: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> "ProjectMetadata":
        if not isinstance(data, dict):
            return cls()
        project_id = data.get("project_id")
        if not isinstance(project_id, (str, int)) or isinstance(project_id, bool):
            project_id = None
        return cls(
            source=_text(data.get("source"), "unknown"),
            project_id=project_id if project_id != "" else None,
            artist=_text(data.get("artist"), "Unknown Artist"),
            script_type=_text(data.get("script_type"), "unknown"),
            patterns=_string_list(data.get("patterns")),
            aesthetics=_string_list(data.get("aesthetics")),
        )


@dataclass(frozen=True)
class Document:
    """A project document from the upstream corpus."""

    id: str
    content: Optional[str] = None
    metadata: ProjectMetadata = field(default_factory=ProjectMetadata)

    @classmethod
    def from_dict(cls, data: dict) -> "Document":
        """Validate a raw corpus record.

        The id falls back to "{source}_{project_id}" when the record has none.
        """
        metadata = ProjectMetadata.from_dict(data.get("metadata"))
        doc_id = data.get("id")
        if doc_id is None or doc_id == "":
            if metadata.project_id is None:
                raise ValueError("Document has neither an id nor a project_id")
            doc_id = f"{metadata.source}_{metadata.project_id}"
        content = data.get("content")
        if content is not None and not isinstance(content, str):
            content = str(content)
        return cls(id=str(doc_id), content=content or None, metadata=metadata)


class ChunkType(str, Enum):
    METADATA = "metadata"
    TAGS = "tags"


@dataclass(frozen=True)
class Chunk:
    """An embeddable unit of text belonging to one project."""

    id: str
    type: ChunkType
    content: str
    project_id: str
    source: str
    artist: str
    script_type: str
