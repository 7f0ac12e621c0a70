"""Output formatters for enriched search results."""

import json
from typing import Any

HEADERS = ["Rank", "Score", "Project", "Artist", "Framework", "Platform"]


def _score(result: dict[str, Any]) -> float:
    return result.get("score") or 0.0


def format_table(results: list[dict[str, Any]]) -> str:
    if not results:
        return "No results found."

    rows = [
        [
            str(rank),
            f"{_score(r):.3f}",
            (r.get("name") or r["projectId"])[:30],
            (r.get("artist") or "Unknown")[:20],
            (r.get("scriptType") or "unknown")[:10],
            (r.get("source") or "unknown")[:10],
        ]
        for rank, r in enumerate(results, 1)
    ]
    widths = [max(len(h), *(len(row[i]) for row in rows)) for i, h in enumerate(HEADERS)]

    lines = [
        " | ".join(h.ljust(widths[i]) for i, h in enumerate(HEADERS)),
        "-+-".join("-" * w for w in widths),
    ]
    for row in rows:
        lines.append(" | ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)))
    lines.append("")
    lines.append(f"Found {len(results)} results.")
    return "\n".join(lines)


def format_json(results: list[dict[str, Any]]) -> str:
    output = [
        {
            "rank": rank,
            "projectId": r["projectId"],
            "name": r.get("name"),
            "artist": r.get("artist"),
            "score": round(_score(r), 4),
            "framework": r.get("scriptType"),
            "platform": r.get("source"),
            "description": r.get("description"),
            "aesthetics": r.get("aesthetics", []),
            "link": r.get("link"),
        }
        for rank, r in enumerate(results, 1)
    ]
    return json.dumps(output, indent=2)


def format_markdown(results: list[dict[str, Any]]) -> str:
    if not results:
        return "No results found."

    lines = [f"## Search Results ({len(results)} found)", ""]
    for rank, r in enumerate(results, 1):
        name = r.get("name") or r["projectId"]
        title = f"[{name}]({r['link']})" if r.get("link") else name
        lines.append(f"### {rank}. {title}")
        lines.append("")
        lines.append(f"- **Artist:** {r.get('artist') or 'Unknown'}")
        lines.append(f"- **Score:** {_score(r):.3f}")
        lines.append(f"- **Framework:** {r.get('scriptType') or 'unknown'}")
        lines.append(f"- **Platform:** {r.get('source') or 'unknown'}")
        if r.get("aesthetics"):
            lines.append(f"- **Aesthetics:** {', '.join(r['aesthetics'])}")
        if r.get("description"):
            lines.append("")
            lines.append(f"> {r['description']}")
        lines.append("")
    return "\n".join(lines)


FORMATTERS = {
    "table": format_table,
    "json": format_json,
    "markdown": format_markdown,
    "md": format_markdown,
}
