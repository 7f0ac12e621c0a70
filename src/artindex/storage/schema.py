"""On-disk layout of the persisted index."""

FORMAT_VERSION = "1.0.0"

VECTORS_FILE = "vectors.json"
METADATA_FILE = "metadata.json"
CHECKSUMS_FILE = "checksums.json"

# Keys every record in vectors.json must carry
VECTOR_KEYS = ("id", "projectId", "type", "embedding", "source", "artist", "scriptType")

# Keys every metadata.json must carry
METADATA_KEYS = ("model", "dimensions", "created", "projectCount", "chunkCount", "version")
