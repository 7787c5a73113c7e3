def normalize_constitution(constitution, section_count=None):
    data = {
        "id": constitution.id,
        "title": constitution.title,
        "organization_name": constitution.organization_name,
        "version": constitution.version,
        "status": constitution.status,
        "last_modified": constitution.updated_at.isoformat() if constitution.updated_at else None,
        "last_modified_by": constitution.last_modified_by,
    }

    if section_count is not None:
        data["section_count"] = section_count

    return data
