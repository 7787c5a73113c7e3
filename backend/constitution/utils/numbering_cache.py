from constitution.domain.numbering import numbering_cache

CACHE_FIELDS = ("article_number", "section_number", "subsection_letter", "amendment_number")


def refresh_numbering_cache(sections):
    """
    Overwrite the cached numbering columns from the numbering engine.

    Only columns whose value actually changes are assigned, so untouched rows
    do not get a new row version.
    """
    cache = numbering_cache(sections)

    for section in sections:
        values = cache.get(section.id, {})
        for field in CACHE_FIELDS:
            value = values.get(field)
            if getattr(section, field) != value:
                setattr(section, field, value)
