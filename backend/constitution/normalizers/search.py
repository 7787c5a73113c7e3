def normalize_search_result(result):
    return {
        "section_id": result.section.id,
        "type": result.section.type,
        "match_type": result.match_type,
        "match_text": result.match_text,
        "display_title": result.display_title,
        "page_number": result.page_number,
    }
