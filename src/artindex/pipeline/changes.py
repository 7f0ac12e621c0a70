"""Content-hash change detection for incremental re-embedding."""

import hashlib
import json
from dataclasses import dataclass, field
from typing import Iterable

from artindex.models import Document


@dataclass
class ChangeSet:
    changed: list[Document] = field(default_factory=list)
    unchanged: list[Document] = field(default_factory=list)
    new_checksums: dict[str, str] = field(default_factory=dict)

    @property
    def has_changes(self) -> bool:
        return bool(self.changed)


def compute_checksum(document: Document) -> str:
    """SHA-256 of the sorted-key, compact JSON encoding of the embedded fields.

    Covers every field that ends up in a chunk's text or vector attributes.
    """
    meta = document.metadata
    payload = {
        "id": document.id,
        "content": document.content,
        "source": meta.source,
        "project_id": meta.project_id,
        "artist": meta.artist,
        "script_type": meta.script_type,
        "patterns": list(meta.patterns),
        "aesthetics": list(meta.aesthetics),
    }
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def get_changed_projects(
    documents: Iterable[Document], checksums: dict[str, str]
) -> ChangeSet:
    """Split documents into changed and unchanged against stored checksums.

    A document is changed when its id has no stored checksum or the stored
    value differs from the freshly computed one. `new_checksums` covers every
    input document.
    """
    result = ChangeSet()
    for document in documents:
        checksum = compute_checksum(document)
        result.new_checksums[document.id] = checksum
        if checksums.get(document.id) == checksum:
            result.unchanged.append(document)
        else:
            result.changed.append(document)
    return result
