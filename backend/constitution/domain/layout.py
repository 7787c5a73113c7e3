# constitution/domain/layout.py
"""
Print layout for the constitution.

Two page models coexist here and they do not always agree:

- `group_into_pages` renders one page per article (with all of its children),
  regardless of how long that article is.
- `build_toc` estimates page numbers from content length, so a long article
  pushes later TOC entries further than the rendered pages actually go.

`toc_page_mismatches` reports where the two disagree.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from .hierarchy import children_of, descendants_of, of_type

COVER_PAGES = 1
TOC_START_PAGE = 2
TOC_ENTRIES_PER_PAGE = 25
CHARS_PER_ESTIMATED_PAGE = 2000

IMAGE_PLACEHOLDER = re.compile(r"\[IMAGE:([^\]]*)\]")


@dataclass(frozen=True)
class TocEntry:
    section: Any
    page_num: int


@dataclass(frozen=True)
class PageMismatch:
    section: Any
    toc_page: int
    rendered_page: int


@dataclass(frozen=True)
class ContentPart:
    kind: str  # "text" | "image"
    value: str


def _first_preamble(sections: Sequence[Any]) -> Optional[Any]:
    preambles = of_type(sections, "preamble")
    return preambles[0] if preambles else None


def _subsection_tree(parent_id: str, sections: Sequence[Any]) -> List[Any]:
    result: List[Any] = []
    for subsection in children_of(parent_id, sections, "subsection"):
        result.append(subsection)
        result.extend(_subsection_tree(subsection.id, sections))
    return result


def _article_body(article: Any, sections: Sequence[Any]) -> List[Any]:
    """Sections of an article, each followed by its subsections depth-first."""
    body: List[Any] = []
    for section in children_of(article.id, sections, "section"):
        body.append(section)
        body.extend(_subsection_tree(section.id, sections))
    return body


def _content_length(section: Any) -> int:
    return len(section.content or "")


def _estimated_pages(length: int, chars_per_page: int) -> int:
    return max(1, math.ceil(length / chars_per_page))


def group_into_pages(sections: Sequence[Any]) -> List[List[Any]]:
    """
    Content pages in print order.

    Preamble alone, then one page per article holding the article and all of
    its sections/subsections, then one page per amendment. Sections whose
    parent no longer resolves do not appear on any page.
    """
    pages: List[List[Any]] = []

    preamble = _first_preamble(sections)
    if preamble is not None:
        pages.append([preamble])

    for article in of_type(sections, "article"):
        pages.append([article, *_article_body(article, sections)])

    for amendment in of_type(sections, "amendment"):
        pages.append([amendment])

    return pages


def flatten_hierarchy(sections: Sequence[Any]) -> List[Any]:
    """Depth-first display order (the pages of `group_into_pages` concatenated)."""
    return [section for page in group_into_pages(sections) for section in page]


def build_toc(
    sections: Sequence[Any],
    *,
    chars_per_page: int = CHARS_PER_ESTIMATED_PAGE,
) -> List[TocEntry]:
    """
    Table of contents with content-length estimated page numbers.

    Numbering starts at page 3 (cover + first TOC page). Each article advances
    the counter by the pages its whole subtree's text would fill; sections and
    subsections share their article's page.
    """
    toc: List[TocEntry] = []
    page_num = COVER_PAGES + TOC_START_PAGE

    preamble = _first_preamble(sections)
    if preamble is not None:
        toc.append(TocEntry(preamble, page_num))
        page_num += 1

    for article in of_type(sections, "article"):
        toc.append(TocEntry(article, page_num))
        for child in _article_body(article, sections):
            toc.append(TocEntry(child, page_num))

        total = _content_length(article) + sum(
            _content_length(d) for d in descendants_of(article.id, sections)
        )
        page_num += _estimated_pages(total, chars_per_page)

    for amendment in of_type(sections, "amendment"):
        toc.append(TocEntry(amendment, page_num))
        page_num += _estimated_pages(_content_length(amendment), chars_per_page)

    return toc


def toc_page_count(entry_count: int, per_page: int = TOC_ENTRIES_PER_PAGE) -> int:
    return math.ceil(entry_count / per_page)


def paginate_toc(
    entries: Sequence[TocEntry],
    per_page: int = TOC_ENTRIES_PER_PAGE,
) -> List[List[TocEntry]]:
    return [list(entries[i:i + per_page]) for i in range(0, len(entries), per_page)]


def calculate_total_pages(
    sections: Sequence[Any],
    show_toc: bool = True,
    *,
    toc_per_page: int = TOC_ENTRIES_PER_PAGE,
) -> int:
    """Cover + TOC pages + rendered content pages."""
    toc_pages = toc_page_count(len(build_toc(sections)), toc_per_page) if show_toc else 0
    return COVER_PAGES + toc_pages + len(group_into_pages(sections))


def estimate_total_pages_legacy(sections: Sequence[Any], show_toc: bool = True) -> int:
    """Older count: one page each for cover, TOC, preamble, article and amendment."""
    pages = COVER_PAGES
    if show_toc:
        pages += 1
    if _first_preamble(sections) is not None:
        pages += 1
    pages += len(of_type(sections, "article"))
    pages += len(of_type(sections, "amendment"))
    return pages


def section_page_map(
    sections: Sequence[Any],
    *,
    toc_per_page: int = TOC_ENTRIES_PER_PAGE,
) -> Dict[str, int]:
    """Page on which each section is actually rendered."""
    toc_pages = toc_page_count(len(build_toc(sections)), toc_per_page)
    content_start = TOC_START_PAGE + toc_pages

    page_map: Dict[str, int] = {}
    for offset, page in enumerate(group_into_pages(sections)):
        for section in page:
            page_map.setdefault(section.id, content_start + offset)
    return page_map


def toc_page_mismatches(
    sections: Sequence[Any],
    *,
    chars_per_page: int = CHARS_PER_ESTIMATED_PAGE,
    toc_per_page: int = TOC_ENTRIES_PER_PAGE,
) -> List[PageMismatch]:
    rendered = section_page_map(sections, toc_per_page=toc_per_page)
    return [
        PageMismatch(entry.section, entry.page_num, rendered[entry.section.id])
        for entry in build_toc(sections, chars_per_page=chars_per_page)
        if rendered.get(entry.section.id) not in (None, entry.page_num)
    ]


def split_content(content: Optional[str]) -> List[ContentPart]:
    """Split a section body into text runs and `[IMAGE:...]` placeholders."""
    parts: List[ContentPart] = []
    position = 0
    text = content or ""

    for match in IMAGE_PLACEHOLDER.finditer(text):
        if match.start() > position:
            parts.append(ContentPart("text", text[position:match.start()]))
        parts.append(ContentPart("image", match.group(1).strip()))
        position = match.end()

    if position < len(text):
        parts.append(ContentPart("text", text[position:]))

    return parts
