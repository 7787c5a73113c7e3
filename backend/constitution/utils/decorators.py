from dataclasses import dataclass
from functools import wraps
from flask import g, jsonify, request
from flask_jwt_extended import get_jwt, get_jwt_identity
from constitution.extensions import db
from constitution.models.user import User
from constitution.application.constitution.constitution import resolve_constitution


@dataclass(frozen=True)
class Actor:
    id: str
    name: str


def actor_required(fn):
    """
    Resolve the editing actor from the verified JWT into `g.current_actor`.
    Must be stacked under @jwt_required().
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        identity = get_jwt_identity()
        if not identity:
            return jsonify({"error": "Actor identity missing"}), 401

        name = get_jwt().get("name")
        if not name:
            user = db.session.get(User, identity)
            name = user.name if user else "Unknown User"

        g.current_actor = Actor(id=identity, name=name)
        return fn(*args, **kwargs)
    return wrapper


def constitution_required(fn):
    """
    Resolve X-Constitution-ID (or the configured default) into
    `g.current_constitution`. Must be stacked under @jwt_required(), so
    unauthenticated requests never reach the database here.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        constitution = resolve_constitution(request.headers.get("X-Constitution-ID"))
        if not constitution:
            return jsonify({"error": "Constitution not found"}), 404

        g.current_constitution = constitution
        return fn(*args, **kwargs)
    return wrapper
