from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction

from .models import Employee, EmployeeIDSequence

EMP_ID_WIDTH = 4


@transaction.atomic
def generate_employee_id():
    prefix = settings.HRMS_SETTINGS["EMPLOYEE_ID_PREFIX"]
    seq, _ = EmployeeIDSequence.objects.select_for_update().get_or_create(id=1)
    while True:
        seq.last_value += 1
        candidate = f"{prefix}-{seq.last_value:0{EMP_ID_WIDTH}d}"
        # imported records may already hold ids from the sequence range
        if not Employee.objects.filter(employee_id=candidate).exists():
            break
    seq.save(update_fields=["last_value"])
    return candidate


def generate_username(first_name, last_name):
    User = get_user_model()
    base = ".".join(
        p for p in (first_name.strip().lower(), last_name.strip().lower()) if p
    ) or "user"
    base = base.replace(" ", "")
    username = base
    counter = 1
    while User.objects.filter(username=username).exists():
        username = f"{base}{counter}"
        counter += 1
    return username


def get_employee_or_none(user):
    """
    Safely fetch the Employee record for a user.
    Returns None if the user has no employee record.
    """
    try:
        return user.employee
    except Employee.DoesNotExist:
        return None
