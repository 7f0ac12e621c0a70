"""Progress events emitted while building the index."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ProgressEvent:
    """Snapshot of embedding progress after a completed batch."""

    processed: int
    total: int
    elapsed_seconds: float
    checkpointed: bool = False

    @property
    def fraction(self) -> float:
        if self.total == 0:
            return 1.0
        return self.processed / self.total

    @property
    def rate(self) -> float:
        """Chunks embedded per second so far."""
        if self.elapsed_seconds <= 0:
            return 0.0
        return self.processed / self.elapsed_seconds

    @property
    def eta_seconds(self) -> Optional[float]:
        """Remaining time extrapolated from observed throughput."""
        rate = self.rate
        if rate == 0:
            return None
        return (self.total - self.processed) / rate
