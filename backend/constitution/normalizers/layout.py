# constitution/normalizers/layout.py
from typing import Any, Dict, List

from constitution.domain.hierarchy import find_orphans
from constitution.domain.layout import (
    build_toc,
    calculate_total_pages,
    estimate_total_pages_legacy,
    group_into_pages,
    paginate_toc,
    section_page_map,
    split_content,
    toc_page_count,
    toc_page_mismatches,
)
from constitution.domain.numbering import display_title, indent_level


def _page_section(section, sections) -> Dict[str, Any]:
    return {
        "id": section.id,
        "type": section.type,
        "display_title": display_title(section, sections),
        "indent_level": indent_level(section, sections),
        "content_parts": [
            {"kind": part.kind, "value": part.value}
            for part in split_content(section.content)
        ],
    }


def normalize_layout(
    sections,
    *,
    toc_per_page: int,
    chars_per_page: int,
) -> Dict[str, Any]:
    """
    Everything the export collaborator needs to synthesize printable markup.

    `toc` carries the estimated page numbers, `rendered_pages` where each
    section really lands; `page_mismatches` lists the disagreements.
    """
    toc = build_toc(sections, chars_per_page=chars_per_page)
    pages = group_into_pages(sections)

    toc_pages: List[List[Dict[str, Any]]] = [
        [
            {
                "section_id": entry.section.id,
                "display_title": display_title(entry.section, sections),
                "indent_level": indent_level(entry.section, sections),
                "page_num": entry.page_num,
            }
            for entry in chunk
        ]
        for chunk in paginate_toc(toc, toc_per_page)
    ]

    return {
        "pages": [[_page_section(s, sections) for s in page] for page in pages],
        "toc": toc_pages,
        "toc_page_count": toc_page_count(len(toc), toc_per_page),
        "total_pages": calculate_total_pages(sections, toc_per_page=toc_per_page),
        "legacy_total_pages": estimate_total_pages_legacy(sections),
        "rendered_pages": section_page_map(sections, toc_per_page=toc_per_page),
        "page_mismatches": [
            {
                "section_id": m.section.id,
                "toc_page": m.toc_page,
                "rendered_page": m.rendered_page,
            }
            for m in toc_page_mismatches(
                sections, chars_per_page=chars_per_page, toc_per_page=toc_per_page
            )
        ],
        "orphans": [s.id for s in find_orphans(sections)],
    }
