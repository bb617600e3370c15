# File: tests/test_validation.py

from app.services.validation import validate_credentials, validate_task_create, validate_task_patch


def test_valid_credentials_are_cleaned():
    result = validate_credentials(" a@x.com ", "abcdef")
    assert result.ok
    assert result.data == {"email": "a@x.com", "password": "abcdef"}


def test_credentials_collect_every_error():
    result = validate_credentials("nope", "123")
    assert not result.ok
    assert [e.field for e in result.errors] == ["email", "password"]


def test_task_create_trims_and_defaults():
    result = validate_task_create({"title": " t ", "text": " body ", "tags": None})
    assert result.ok
    assert result.data == {"title": "t", "text": "body", "tags": None, "due_date": None}


def test_task_create_rejects_overlong_title():
    result = validate_task_create({"title": "x" * 256})
    assert [e.field for e in result.errors] == ["title"]


def test_task_patch_only_keeps_sent_fields():
    result = validate_task_patch({"tags": " work "})
    assert result.ok
    assert result.data == {"tags": "work"}


def test_task_patch_rejects_null_title():
    assert not validate_task_patch({"title": None}).ok


def test_password_limit_counts_bytes_not_characters():
    assert validate_credentials("a@x.com", "p" * 72).ok
    assert [e.field for e in validate_credentials("a@x.com", "p" * 73).errors] == ["password"]
    # 37 two-byte characters is 74 bytes
    assert not validate_credentials("a@x.com", "é" * 37).ok


def test_due_date_is_normalized_to_utc():
    from datetime import datetime, timedelta, timezone

    local = datetime(2026, 11, 1, 9, 0, tzinfo=timezone(timedelta(hours=2)))
    naive = datetime(2026, 11, 1, 9, 0)
    assert validate_task_create({"title": "t", "due_date": local}).data["due_date"] == datetime(
        2026, 11, 1, 7, 0, tzinfo=timezone.utc
    )
    assert validate_task_patch({"due_date": naive}).data["due_date"].tzinfo == timezone.utc
