from types import SimpleNamespace

import pytest

from support import workflow


def make_request(status, owner_id=1, assigned_to_id=None):
    return SimpleNamespace(status=status, owner_id=owner_id, assigned_to_id=assigned_to_id)


class TestTransitions:

    @pytest.mark.parametrize("from_status,to_status,role", [
        ("OPEN", "IN_PROGRESS", "manager"),
        ("IN_PROGRESS", "WAITING_INFO", "admin"),
        ("WAITING_INFO", "RESOLVED", "manager"),
        ("RESOLVED", "CLOSED", "employee"),
        ("IN_PROGRESS", "CLOSED", "admin"),
    ])
    def test_allowed(self, from_status, to_status, role):
        assert workflow.is_valid_transition(from_status, to_status, role)

    @pytest.mark.parametrize("from_status,to_status,role", [
        ("OPEN", "IN_PROGRESS", "employee"),
        ("IN_PROGRESS", "CLOSED", "manager"),
        ("OPEN", "RESOLVED", "admin"),
        ("CLOSED", "OPEN", "admin"),
        ("RESOLVED", "CLOSED", "manager"),
    ])
    def test_refused(self, from_status, to_status, role):
        assert not workflow.is_valid_transition(from_status, to_status, role)

    def test_same_status_is_not_a_transition(self):
        assert not workflow.is_valid_transition("OPEN", "OPEN", "admin")

    def test_role_is_case_insensitive(self):
        assert workflow.is_valid_transition("OPEN", "IN_PROGRESS", "MANAGER")

    def test_valid_next_statuses(self):
        assert workflow.valid_next_statuses("IN_PROGRESS", "admin") == [
            "WAITING_INFO", "RESOLVED", "CLOSED"]
        assert workflow.valid_next_statuses("IN_PROGRESS", "manager") == [
            "WAITING_INFO", "RESOLVED"]
        assert workflow.valid_next_statuses("RESOLVED", "employee") == ["CLOSED"]
        assert workflow.valid_next_statuses("CLOSED", "admin") == []


class TestCanPerformAction:

    def test_view_and_comment(self):
        req = make_request("OPEN", owner_id=1, assigned_to_id=2)
        for action in ("view", "comment"):
            assert workflow.can_perform_action("employee", action, req, 1)
            assert workflow.can_perform_action("employee", action, req, 2)
            assert workflow.can_perform_action("manager", action, req, 9)
            assert not workflow.can_perform_action("employee", action, req, 3)

    def test_owner_edit_depends_on_status(self):
        assert workflow.can_perform_action("employee", "edit", make_request("WAITING_INFO"), 1)
        assert not workflow.can_perform_action("employee", "edit", make_request("RESOLVED"), 1)
        assert workflow.can_perform_action("admin", "edit", make_request("CLOSED"), 5)

    def test_assign_is_staff_only(self):
        req = make_request("OPEN")
        assert workflow.can_perform_action("manager", "assign", req, 5)
        assert not workflow.can_perform_action("employee", "assign", req, 1)

    def test_close(self):
        assert workflow.can_perform_action("employee", "close", make_request("RESOLVED"), 1)
        assert not workflow.can_perform_action("employee", "close", make_request("IN_PROGRESS"), 1)
        assert workflow.can_perform_action("admin", "close", make_request("OPEN"), 7)

        assigned_open = make_request("OPEN", assigned_to_id=2)
        assigned_busy = make_request("IN_PROGRESS", assigned_to_id=2)
        assert not workflow.can_perform_action("manager", "close", assigned_open, 2)
        assert workflow.can_perform_action("manager", "close", assigned_busy, 2)

    def test_unknown_action(self):
        assert not workflow.can_perform_action("admin", "archive", make_request("OPEN"), 1)


def test_labels():
    assert workflow.status_label("WAITING_INFO") == "Waiting Info"
    assert workflow.category_label("IT_SUPPORT") == "IT Support"
    assert workflow.category_label("UNKNOWN") == "UNKNOWN"
