from constitution.domain.numbering import display_title, indent_level


def normalize_section(section, all_sections=None, admin=False):
    data = {
        "id": section.id,
        "type": section.type,
        "title": section.title or "",
        "content": section.content or "",
        "order": section.order,
        "parent_id": section.parent_id,
    }

    if all_sections is not None:
        data["display_title"] = display_title(section, all_sections)
        data["indent_level"] = indent_level(section, all_sections)

    if admin:
        data["version"] = section.version_id
        data["created_at"] = section.created_at.isoformat() if section.created_at else None
        data["last_modified"] = section.updated_at.isoformat() if section.updated_at else None
        data["last_modified_by"] = section.last_modified_by

    return data
