# ruff: noqa

"""Tests for display formatting of audit change values."""

from __future__ import annotations

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

import pytest

from app.services.audit_format import (
    change_details,
    format_right_value,
    format_timestamp,
    format_value,
    metadata_lines,
    rights_sub_diff,
    summarize_changes,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, "—"),
        (True, "Yes"),
        (False, "No"),
        ([], "None"),
        (["Support", "Sales"], "Support, Sales"),
        ([True, None, 3], "true, , 3"),
        ({"can_add_members": True, "can_approve_holidays": False}, "Add Members"),
        ({"can_add_members": False}, "None"),
        ({}, "{}"),
        (5, "5"),
        (5.0, "5"),
        (2.5, "2.5"),
        ("admin", "admin"),
        ("", ""),
    ],
)
def test_format_value(value: object, expected: str) -> None:
    assert format_value(value) == expected


def test_format_value_lists_enabled_rights_by_label_with_raw_key_fallback() -> None:
    rights = {"can_approve_holidays": True, "custom_flag": True, "can_add_members": False}

    assert format_value(rights) == "Approve Holidays, custom_flag"


def test_format_right_value() -> None:
    assert format_right_value(True) == "Yes"
    assert format_right_value(False) == "No"
    assert format_right_value(None) == "—"
    assert format_right_value("write") == "write"


def test_format_timestamp_uses_viewer_timezone() -> None:
    value = datetime(2024, 3, 10, 14, 5)

    assert format_timestamp(value) == "10 Mar 2024, 14:05"
    assert format_timestamp(value, ZoneInfo("Europe/Madrid")) == "10 Mar 2024, 15:05"
    assert format_timestamp(datetime(2024, 3, 5, 9, 0, tzinfo=UTC)) == "05 Mar 2024, 09:00"


def test_rights_sub_diff_keeps_old_key_order_then_new_keys() -> None:
    old = {"can_view_all_teams": False, "can_add_members": True}
    new = {"can_add_members": False, "can_view_all_teams": True, "custom_flag": True}

    changes = rights_sub_diff(old, new)

    assert [change.key for change in changes] == [
        "can_view_all_teams",
        "can_add_members",
        "custom_flag",
    ]
    assert [change.line for change in changes] == [
        "View All Teams: No → Yes",
        "Add Members: Yes → No",
        "custom_flag: — → Yes",
    ]


def test_summarize_scalar_and_rights_changes() -> None:
    changes = {
        "role": {"old": "employee", "new": "admin"},
        "rights": {
            "old": {"can_approve_holidays": False, "can_add_members": False},
            "new": {"can_approve_holidays": True, "can_add_members": False},
        },
    }

    assert summarize_changes(changes) == "Role: employee → admin, Rights: 1 right changed"


def test_summarize_pluralises_and_reports_zero_rights_changed() -> None:
    two = {
        "rights": {
            "old": {"can_add_members": False, "can_approve_holidays": False},
            "new": {"can_add_members": True, "can_approve_holidays": True},
        },
    }
    none = {"rights": {"old": {"can_add_members": True}, "new": {"can_add_members": True}}}

    assert summarize_changes(two) == "Rights: 2 rights changed"
    assert summarize_changes(none) == "Rights: 0 rights changed"


def test_summarize_uses_raw_field_name_when_unlabelled() -> None:
    assert summarize_changes({"nickname": {"old": None, "new": "Bobby"}}) == "nickname: — → Bobby"


def test_rights_field_with_empty_side_renders_as_plain_values() -> None:
    details = change_details({"rights": {"old": None, "new": {"can_add_members": True}}})

    assert details[0].rights is None
    assert details[0].lines == ["Rights: — → Add Members"]


def test_change_details_expand_rights_sub_diff() -> None:
    details = change_details(
        {
            "team": {"old": None, "new": "Support"},
            "rights": {
                "old": {"can_approve_holidays": False},
                "new": {"can_approve_holidays": True},
            },
        },
    )

    assert details[0].lines == ["Team: — → Support"]
    assert details[1].lines == ["Rights:", "  Approve Holidays: No → Yes"]


def test_change_details_reports_no_rights_changed() -> None:
    details = change_details(
        {"rights": {"old": {"can_add_members": True}, "new": {"can_add_members": True}}},
    )

    assert details[0].lines == ["Rights:", "  No rights changed"]


def test_metadata_lines_use_field_labels() -> None:
    lines = metadata_lines({"email": "bob@example.com", "member_count": 3, "max_employees": 5})

    assert lines == ["Email: bob@example.com", "Members Used: 3", "Members Subscribed: 5"]


def test_sub_diff_lists_only_changed_and_added_rights() -> None:
    old = {"can_add_members": True, "can_approve_holidays": False}
    new = {"can_add_members": True, "can_approve_holidays": True, "can_view_all_teams": True}

    assert [change.key for change in rights_sub_diff(old, new)] == [
        "can_approve_holidays",
        "can_view_all_teams",
    ]
    assert summarize_changes({"rights": {"old": old, "new": new}}) == "Rights: 2 rights changed"
