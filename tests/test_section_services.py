"""Tests for the section use cases: create, update, delete, audit and change feed."""

from __future__ import annotations

import pytest
from werkzeug.exceptions import NotFound

from constitution.application.constitution.audit_log import list_audit_entries
from constitution.application.constitution.constitution import update_constitution
from constitution.application.constitution.create_section import create_section
from constitution.application.constitution.delete_section import delete_section
from constitution.application.constitution.queries import load_sections
from constitution.application.constitution.update_section import update_section
from constitution.domain.hierarchy import find_orphans
from constitution.domain.invariants.exceptions import ConcurrencyConflict, InvariantViolation
from constitution.extensions import db
from constitution.models.audit_log import ConstitutionAuditEntry
from constitution.models.section import ConstitutionSection
from constitution.utils.change_feed import change_feed
from constitution.utils.transaction import transactional


@pytest.fixture()
def feed_events(constitution):
    """Collect change feed snapshots for the test constitution."""
    events = []
    unsubscribe = change_feed.subscribe(constitution.id, events.append)
    yield events
    unsubscribe()


class TestCreateSection:
    def test_defaults_and_order(self, constitution, actor) -> None:
        """Titles default per type; order is max sibling order + 1."""
        preamble = create_section(constitution_id=constitution.id, section_type="preamble", **actor)
        article = create_section(constitution_id=constitution.id, section_type="article", **actor)
        section = create_section(
            constitution_id=constitution.id, section_type="section", parent_id=article.id, **actor
        )
        amendment = create_section(constitution_id=constitution.id, section_type="amendment", **actor)

        assert preamble.title == "Preamble"
        assert article.title == "General Provisions"
        assert section.title == "Name of Student Organization"
        assert amendment.title == "Amendment 1"

        assert (preamble.order, article.order, amendment.order) == (1, 2, 3)
        assert section.order == 1

    def test_numbering_cache_is_filled(self, constitution, actor) -> None:
        article = create_section(constitution_id=constitution.id, section_type="article", **actor)
        section = create_section(
            constitution_id=constitution.id, section_type="section", parent_id=article.id, **actor
        )
        subsection = create_section(
            constitution_id=constitution.id, section_type="subsection", parent_id=section.id, **actor
        )

        assert article.article_number == 1
        assert section.section_number == 1
        assert subsection.subsection_letter == "1.1"

    def test_rejects_invalid_hierarchy(self, constitution, actor) -> None:
        article = create_section(constitution_id=constitution.id, section_type="article", **actor)

        with pytest.raises(InvariantViolation):
            create_section(constitution_id=constitution.id, section_type="section", **actor)
        with pytest.raises(InvariantViolation):
            create_section(
                constitution_id=constitution.id,
                section_type="subsection",
                parent_id=article.id,
                **actor,
            )
        with pytest.raises(InvariantViolation):
            create_section(constitution_id=constitution.id, section_type="chapter", **actor)

        assert len(load_sections(constitution.id)) == 1

    def test_single_preamble(self, constitution, actor) -> None:
        create_section(constitution_id=constitution.id, section_type="preamble", **actor)

        with pytest.raises(InvariantViolation):
            create_section(constitution_id=constitution.id, section_type="preamble", **actor)

    def test_create_is_audited(self, constitution, actor) -> None:
        article = create_section(constitution_id=constitution.id, section_type="article", **actor)

        entry = ConstitutionAuditEntry.query.filter_by(section_id=article.id).one()
        assert entry.change_kind == "create"
        assert entry.description == 'Created Article 1: "General Provisions"'
        assert entry.actor_name == "Ada Editor"
        assert entry.before_value is None

    def test_audit_failure_does_not_fail_create(self, constitution, actor, monkeypatch, caplog) -> None:
        """A broken audit write is logged and the section still exists."""

        def broken(*args, **kwargs):
            raise RuntimeError("audit store unavailable")

        monkeypatch.setattr("constitution.utils.audit.describe_change", broken)

        article = create_section(constitution_id=constitution.id, section_type="article", **actor)

        assert [s.id for s in load_sections(constitution.id)] == [article.id]
        assert ConstitutionAuditEntry.query.count() == 0
        assert "Failed to write create audit entry" in caplog.text


class TestUpdateSection:
    def test_partial_update_is_audited(self, constitution, actor) -> None:
        article = create_section(constitution_id=constitution.id, section_type="article", **actor)

        update_section(
            constitution_id=constitution.id,
            section_id=article.id,
            data={"title": "Name", "content": "Hello world"},
            **actor,
        )

        assert article.title == "Name"
        entry = ConstitutionAuditEntry.query.filter_by(change_kind="update").one()
        assert entry.description == (
            'Updated Article 1: changed title from "General Provisions" to "Name", '
            "added content (11 characters)"
        )

    def test_no_op_update_is_rejected(self, constitution, actor) -> None:
        article = create_section(constitution_id=constitution.id, section_type="article", **actor)

        with pytest.raises(InvariantViolation):
            update_section(
                constitution_id=constitution.id,
                section_id=article.id,
                data={"title": "General Provisions", "unknown": 1},
                **actor,
            )

    def test_invalid_payload(self, constitution, actor) -> None:
        article = create_section(constitution_id=constitution.id, section_type="article", **actor)

        with pytest.raises(InvariantViolation):
            update_section(
                constitution_id=constitution.id,
                section_id=article.id,
                data={"order": "first"},
                **actor,
            )

    def test_type_change_must_keep_children_valid(self, constitution, actor) -> None:
        article = create_section(constitution_id=constitution.id, section_type="article", **actor)
        create_section(
            constitution_id=constitution.id, section_type="section", parent_id=article.id, **actor
        )

        with pytest.raises(InvariantViolation):
            update_section(
                constitution_id=constitution.id,
                section_id=article.id,
                data={"type": "amendment"},
                **actor,
            )

        assert db.session.get(ConstitutionSection, article.id).type == "article"

    def test_reparent_into_own_subtree_is_rejected(self, constitution, actor) -> None:
        article = create_section(constitution_id=constitution.id, section_type="article", **actor)
        section = create_section(
            constitution_id=constitution.id, section_type="section", parent_id=article.id, **actor
        )
        outer = create_section(
            constitution_id=constitution.id, section_type="subsection", parent_id=section.id, **actor
        )
        inner = create_section(
            constitution_id=constitution.id, section_type="subsection", parent_id=outer.id, **actor
        )

        with pytest.raises(InvariantViolation):
            update_section(
                constitution_id=constitution.id,
                section_id=outer.id,
                data={"parent_id": inner.id},
                **actor,
            )

    def test_missing_section(self, constitution, actor) -> None:
        with pytest.raises(NotFound):
            update_section(
                constitution_id=constitution.id,
                section_id="does-not-exist",
                data={"title": "x"},
                **actor,
            )

    def test_stale_row_version_is_a_conflict(self, constitution, actor) -> None:
        """A row changed underneath us fails the commit instead of overwriting it."""
        article = create_section(constitution_id=constitution.id, section_type="article", **actor)
        article_id = article.id
        seen_version = article.version_id
        table = ConstitutionSection.__table__

        # Another writer commits on its own connection
        with db.engine.begin() as conn:
            conn.execute(
                table.update()
                .where(table.c.id == article_id)
                .values(title="Theirs", version_id=table.c.version_id + 1)
            )

        assert article.version_id == seen_version
        with pytest.raises(ConcurrencyConflict):
            with transactional():
                article.title = "Mine"

        db.session.expire_all()
        reloaded = db.session.get(ConstitutionSection, article_id)
        assert reloaded.title == "Theirs"
        assert reloaded.version_id == seen_version + 1


class TestDeleteSection:
    def test_children_are_orphaned(self, constitution, actor) -> None:
        """Deleting an article keeps its sections, now pointing at nothing."""
        first = create_section(constitution_id=constitution.id, section_type="article", **actor)
        second = create_section(constitution_id=constitution.id, section_type="article", **actor)
        child = create_section(
            constitution_id=constitution.id, section_type="section", parent_id=first.id, **actor
        )

        delete_section(constitution_id=constitution.id, section_id=first.id, **actor)

        remaining = load_sections(constitution.id)
        assert {s.id for s in remaining} == {second.id, child.id}
        assert [s.id for s in find_orphans(remaining)] == [child.id]
        assert second.article_number == 1

        entry = ConstitutionAuditEntry.query.filter_by(change_kind="delete").one()
        assert entry.description == 'Deleted Article 1: "General Provisions"'
        assert entry.after_value is None


class TestChangeFeed:
    def test_subscribers_get_committed_snapshots(self, constitution, actor, feed_events) -> None:
        article = create_section(constitution_id=constitution.id, section_type="article", **actor)
        update_section(
            constitution_id=constitution.id,
            section_id=article.id,
            data={"title": "Name"},
            **actor,
        )

        assert len(feed_events) == 2
        assert [s.id for s in feed_events[-1]] == [article.id]
        assert feed_events[-1][0].title == "Name"

    def test_rolled_back_writes_are_not_delivered(self, constitution, actor, feed_events) -> None:
        article = create_section(constitution_id=constitution.id, section_type="article", **actor)
        feed_events.clear()

        with pytest.raises(InvariantViolation):
            update_section(
                constitution_id=constitution.id,
                section_id=article.id,
                data={"type": "section"},
                **actor,
            )

        assert feed_events == []

    def test_unsubscribe_stops_delivery(self, constitution, actor) -> None:
        events = []
        unsubscribe = change_feed.subscribe(constitution.id, events.append)
        unsubscribe()

        create_section(constitution_id=constitution.id, section_type="article", **actor)

        assert events == []


class TestAuditLog:
    def test_entries_are_immutable(self, constitution, actor) -> None:
        create_section(constitution_id=constitution.id, section_type="article", **actor)
        entry = ConstitutionAuditEntry.query.one()

        entry.description = "rewritten"
        with pytest.raises(RuntimeError, match="immutable"):
            db.session.commit()
        db.session.rollback()

    def test_filters(self, constitution, actor) -> None:
        article = create_section(constitution_id=constitution.id, section_type="article", **actor)
        create_section(constitution_id=constitution.id, section_type="amendment", **actor)
        update_section(
            constitution_id=constitution.id,
            section_id=article.id,
            data={"title": "Membership"},
            **actor,
        )

        newest = list_audit_entries(constitution_id=constitution.id)
        assert [e.change_kind for e in newest] == ["update", "create", "create"]

        updates = list_audit_entries(constitution_id=constitution.id, change_kind="update")
        assert len(updates) == 1

        matching = list_audit_entries(constitution_id=constitution.id, text="MEMBER")
        assert [e.section_id for e in matching] == [article.id]

        assert list_audit_entries(constitution_id=constitution.id, actor_id="someone-else") == []
        assert len(list_audit_entries(constitution_id=constitution.id, limit=1)) == 1


class TestConstitutionLifecycle:
    def test_publish_then_archive(self, constitution, actor) -> None:
        update_constitution(
            constitution_id=constitution.id, actor_id=actor["actor_id"], data={"status": "published"}
        )
        update_constitution(
            constitution_id=constitution.id, actor_id=actor["actor_id"], data={"status": "archived"}
        )
        assert constitution.status == "archived"

        with pytest.raises(InvariantViolation):
            update_constitution(
                constitution_id=constitution.id, actor_id=actor["actor_id"], data={"status": "draft"}
            )

    def test_draft_cannot_be_archived_directly(self, constitution, actor) -> None:
        with pytest.raises(InvariantViolation):
            update_constitution(
                constitution_id=constitution.id, actor_id=actor["actor_id"], data={"status": "archived"}
            )

    def test_version_must_be_positive(self, constitution, actor) -> None:
        with pytest.raises(InvariantViolation):
            update_constitution(
                constitution_id=constitution.id, actor_id=actor["actor_id"], data={"version": 0}
            )
