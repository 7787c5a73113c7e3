# constitution/domain/search.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from .layout import section_page_map
from .numbering import display_title

MIN_QUERY_LENGTH = 2
SNIPPET_RADIUS = 50


@dataclass(frozen=True)
class SearchResult:
    section: Any
    match_type: str  # "title" | "content"
    match_text: str
    display_title: str
    page_number: Optional[int] = None


def _snippet(content: str, start: int, length: int, radius: int) -> str:
    begin = max(0, start - radius)
    end = min(len(content), start + length + radius)

    snippet = content[begin:end]
    if begin > 0:
        snippet = "..." + snippet
    if end < len(content):
        snippet = snippet + "..."
    return snippet


def search_sections(
    sections: Sequence[Any],
    query: str,
    *,
    radius: int = SNIPPET_RADIUS,
) -> List[SearchResult]:
    needle = (query or "").strip()
    if len(needle) < MIN_QUERY_LENGTH:
        return []

    # Match on the original text so offsets stay valid where lower() changes length
    pattern = re.compile(re.escape(needle), re.IGNORECASE)

    page_map = section_page_map(sections)
    results: List[SearchResult] = []

    for section in sections:
        title = section.title or ""
        content = section.content or ""
        page_number = page_map.get(section.id)

        if pattern.search(title):
            results.append(SearchResult(
                section, "title", title, display_title(section, sections), page_number,
            ))
            continue

        match = pattern.search(content)
        if match:
            results.append(SearchResult(
                section,
                "content",
                _snippet(content, match.start(), match.end() - match.start(), radius),
                display_title(section, sections),
                page_number,
            ))

    # Title hits first, then document order
    results.sort(key=lambda r: (r.match_type != "title", r.section.order or 0))
    return results
