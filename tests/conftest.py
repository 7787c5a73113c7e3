"""Shared test fixtures for the constitution backend."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from flask_jwt_extended import create_access_token

from constitution import create_app
from constitution.application.constitution.constitution import ensure_constitution
from constitution.extensions import db
from constitution.models.user import User

CONSTITUTION_ID = "test-constitution"


@pytest.fixture()
def make_section():
    """Factory for plain section records, as the domain layer sees them."""

    def _make(id, type, order=1, parent_id=None, title="", content="", **extra):
        return SimpleNamespace(
            id=id,
            type=type,
            order=order,
            parent_id=parent_id,
            title=title,
            content=content,
            **extra,
        )

    return _make


@pytest.fixture()
def app():
    """Application bound to a fresh in-memory database."""
    app = create_app("testing")

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def user(app):
    user = User(email="editor@example.org", display_name="Ada Editor")
    user.set_password("correct horse")
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture()
def constitution(app):
    return ensure_constitution(
        constitution_id=CONSTITUTION_ID,
        title="Test Constitution",
        organization_name="Test Organization",
    )


@pytest.fixture()
def actor(user):
    """Keyword arguments identifying the acting editor for service calls."""
    return {"actor_id": user.id, "actor_name": user.name}


@pytest.fixture()
def auth_headers(user, constitution):
    token = create_access_token(identity=user.id, additional_claims={"name": user.name})
    return {
        "Authorization": f"Bearer {token}",
        "X-Constitution-ID": constitution.id,
    }
