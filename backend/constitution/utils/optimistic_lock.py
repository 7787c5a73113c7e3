from datetime import timezone
from flask import request, abort
from dateutil.parser import parse, ParserError


def as_utc(ts):
    """Naive timestamps (SQLite hands those back) are taken to be UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def _check_row_version(section):
    expected = request.headers.get("If-Match")
    if not expected:
        return

    if expected.strip('"') != str(section.version_id):
        abort(409, description="Conflict detected. Section version has changed.")


def _check_unmodified_since(section):
    header = request.headers.get("If-Unmodified-Since")
    if not header:
        return

    try:
        client_ts = as_utc(parse(header))
    except (ParserError, OverflowError):
        abort(400, description="Invalid If-Unmodified-Since header")

    if section.updated_at is None:
        return

    if as_utc(section.updated_at) > client_ts:
        abort(409, description="Conflict detected. Section has been modified.")


def enforce_optimistic_lock(section):
    """
    Honors the client's write preconditions before a section update.

    - If-Match: the section's row version as last read (see `version` in responses)
    - If-Unmodified-Since: the section's `last_modified` as last read

    Either mismatch aborts with 409; no header means no precondition.
    """
    _check_row_version(section)
    _check_unmodified_since(section)
