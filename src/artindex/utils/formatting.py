"""Human-readable formatting helpers for CLI output."""


def format_duration(seconds: float) -> str:
    """Format a duration as "1h 2m 3s", "2m 3s" or "3s"."""
    total = int(max(seconds, 0))
    minutes, secs = divmod(total, 60)
    hours, minutes = divmod(minutes, 60)

    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def format_size(size_bytes: int) -> str:
    """Format a byte count in the largest fitting unit."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    return f"{size_bytes / (1024 * 1024):.1f} MB"
