"""
Employee request lifecycle.

Pure functions over plain values: nothing here queries the database.
``can_perform_action`` takes any object exposing ``owner_id`` (the
requesting user's id), ``assigned_to_id`` and ``status``.
"""

OPEN = "OPEN"
IN_PROGRESS = "IN_PROGRESS"
WAITING_INFO = "WAITING_INFO"
RESOLVED = "RESOLVED"
CLOSED = "CLOSED"

STATUS_CHOICES = [
    (OPEN, "Open"),
    (IN_PROGRESS, "In Progress"),
    (WAITING_INFO, "Waiting Info"),
    (RESOLVED, "Resolved"),
    (CLOSED, "Closed"),
]

CATEGORY_CHOICES = [
    ("QUERY", "General Query"),
    ("IT_SUPPORT", "IT Support"),
    ("PAYROLL", "Payroll"),
    ("GENERAL", "General Service"),
]

EMPLOYEE = "employee"
MANAGER = "manager"
ADMIN = "admin"

# (from, to) -> roles allowed to make the move
TRANSITIONS = {
    (RESOLVED, CLOSED): (EMPLOYEE, ADMIN),
    (OPEN, IN_PROGRESS): (MANAGER, ADMIN),
    (IN_PROGRESS, WAITING_INFO): (MANAGER, ADMIN),
    (IN_PROGRESS, RESOLVED): (MANAGER, ADMIN),
    (WAITING_INFO, IN_PROGRESS): (MANAGER, ADMIN),
    (WAITING_INFO, RESOLVED): (MANAGER, ADMIN),
    (IN_PROGRESS, CLOSED): (ADMIN,),
    (WAITING_INFO, CLOSED): (ADMIN,),
}

# statuses in which the owner may still edit title/description
OWNER_EDITABLE = (OPEN, IN_PROGRESS, WAITING_INFO)

ACTIONS = ("view", "edit", "assign", "comment", "close")

_STATUS_LABELS = dict(STATUS_CHOICES)
_CATEGORY_LABELS = dict(CATEGORY_CHOICES)


def _role(role):
    return (role or "").lower()


def is_valid_transition(from_status, to_status, role):
    if from_status == to_status:
        return False
    allowed = TRANSITIONS.get((from_status, to_status))
    if allowed is None:
        return False
    return _role(role) in allowed


def valid_next_statuses(current, role):
    role = _role(role)
    return [
        to_status
        for (from_status, to_status), roles in TRANSITIONS.items()
        if from_status == current and role in roles
    ]


def can_perform_action(role, action, request, user_id):
    role = _role(role)
    is_owner = request.owner_id == user_id
    is_assignee = request.assigned_to_id is not None and request.assigned_to_id == user_id
    is_staff = role in (MANAGER, ADMIN)

    if action in ("view", "comment"):
        return is_owner or is_assignee or is_staff
    if action == "edit":
        if is_owner:
            return request.status in OWNER_EDITABLE
        return is_staff
    if action == "assign":
        return is_staff
    if action == "close":
        if is_owner:
            return request.status == RESOLVED
        return role == ADMIN or (is_assignee and request.status != OPEN)
    return False


def status_label(status):
    return _STATUS_LABELS.get(status, status)


def category_label(category):
    return _CATEGORY_LABELS.get(category, category)
