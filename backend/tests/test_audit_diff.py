# ruff: noqa

"""Tests for change detection between before/after snapshots."""

from __future__ import annotations

from app.services.audit import diff_changes, values_equal


def test_diff_returns_none_when_nothing_changed() -> None:
    before = {"name": "Support", "require_mfa": False}
    assert diff_changes(before, {"name": "Support", "require_mfa": False}) is None


def test_diff_records_old_and_new_for_changed_fields_only() -> None:
    before = {"first_name": "Bob", "role": "employee", "email": "bob@example.com"}
    after = {"first_name": "Bob", "role": "admin"}

    assert diff_changes(before, after) == {"role": {"old": "employee", "new": "admin"}}


def test_diff_ignores_keys_only_present_before() -> None:
    assert diff_changes({"name": "Acme", "member_label": "member"}, {"name": "Acme"}) is None


def test_diff_treats_missing_before_key_as_none() -> None:
    assert diff_changes({}, {"team": "Support"}) == {"team": {"old": None, "new": "Support"}}
    assert diff_changes({}, {"team": None}) is None


def test_nested_maps_compare_structurally() -> None:
    before = {"rights": {"can_add_members": True, "can_approve_holidays": False}}
    after = {"rights": {"can_approve_holidays": False, "can_add_members": True}}

    assert diff_changes(before, after) is None


def test_nested_map_change_records_whole_maps() -> None:
    old_rights = {"can_add_members": True, "can_approve_holidays": False}
    new_rights = {"can_add_members": True, "can_approve_holidays": True}

    assert diff_changes({"rights": old_rights}, {"rights": new_rights}) == {
        "rights": {"old": old_rights, "new": new_rights},
    }


def test_values_equal_keeps_list_order_significant() -> None:
    assert values_equal(["a", "b"], ["a", "b"])
    assert not values_equal(["a", "b"], ["b", "a"])
    assert values_equal(["a"], ("a",))


def test_values_equal_never_matches_bool_and_number() -> None:
    assert not values_equal(True, 1)
    assert not values_equal(0, False)
    assert values_equal(False, False)
    assert values_equal(5, 5.0)


def test_values_equal_distinguishes_none_from_empty() -> None:
    assert not values_equal(None, "")
    assert not values_equal({}, None)
    assert values_equal({}, {})


def test_unchanged_nan_is_not_a_change() -> None:
    nan = float("nan")
    assert values_equal(nan, float("nan"))
    assert values_equal({"scores": [nan]}, {"scores": [nan]})
    assert diff_changes({"score": nan}, {"score": float("nan")}) is None
    changes = diff_changes({"score": nan}, {"score": 1.5})
    assert changes is not None
    assert changes["score"]["new"] == 1.5
