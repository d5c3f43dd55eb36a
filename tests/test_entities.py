import uuid
from datetime import datetime, timezone

import pytest

from teamdocs.domains.documents.entities import Activity, ActivityType, Document

from tests.conftest import make_user

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


def make_document(**fields):
    fields.setdefault("title", "Release Notes")
    fields.setdefault("content", "What we are shipping")
    return Document.create_document(fields, uuid.uuid4(), NOW)


def test_create_document_defaults():
    document = make_document()

    assert document.version == 1
    assert document.summary is None
    assert document.tags == []
    assert document.created_at == document.updated_at == NOW


def test_apply_changes_returns_new_state():
    document = make_document(tags=["beta"])
    later = datetime(2026, 3, 2, tzinfo=timezone.utc)

    updated = document.apply_changes({"content": "Shipped"}, later)

    assert updated is not document
    assert updated.version == 2
    assert updated.content == "Shipped"
    assert updated.title == document.title
    assert updated.updated_at == later
    assert updated.created_at == NOW
    assert document.version == 1


def test_apply_changes_rejects_unknown_fields():
    with pytest.raises(ValueError):
        make_document().apply_changes({"version": 10})


def test_snapshot_copies_tags():
    document = make_document(tags=["beta"])
    editor = uuid.uuid4()

    version = document.snapshot(editor, "Document updated", NOW)
    document.tags.append("later")

    assert version.tags == ["beta"]
    assert version.author_id == editor
    assert version.document_id == document.id


@pytest.mark.parametrize("query, expected", [
    ("BETA", True),
    ("release", True),
    ("SHIPPING", True),
    ("gamma", False),
])
def test_matches(query, expected):
    assert make_document(tags=["beta"]).matches(query) is expected


def test_activity_description_uses_title():
    activity = Activity.record(ActivityType.DELETED, uuid.uuid4(), "Runbook", None, NOW)

    assert activity.description == 'Deleted document "Runbook"'
    assert activity.document_id is None


def test_can_modify():
    author = make_user("author@example.com")
    other = make_user("other@example.com")
    admin = make_user("admin@example.com", role="admin")

    assert author.can_modify(author.id)
    assert not other.can_modify(author.id)
    assert admin.can_modify(author.id)
