from datetime import date
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from employees.models import Department, Employee

User = get_user_model()


@pytest.fixture
def department(db):
    return Department.objects.create(name="Engineering")


@pytest.fixture
def make_user(db):
    def _make(username, role=User.ROLE_EMPLOYEE, password="pass12345!", **extra):
        return User.objects.create_user(
            username=username,
            email=f"{username}@example.com",
            password=password,
            role=role,
            **extra,
        )
    return _make


@pytest.fixture
def make_employee(db, department):
    counter = {"n": 0}

    def _make(user, salary=Decimal("30000"), **extra):
        counter["n"] += 1
        fields = {
            "employee_id": f"EMP-T{counter['n']:03d}",
            "first_name": user.first_name or user.username.title(),
            "last_name": user.last_name or "Tester",
            "department": department,
            "position": "Developer",
            "hire_date": date(2022, 1, 3),
            "salary": salary,
        }
        fields.update(extra)
        return Employee.objects.create(user=user, **fields)
    return _make


@pytest.fixture
def admin_user(make_user):
    return make_user("admin", role=User.ROLE_ADMIN, first_name="Ada", last_name="Admin")


@pytest.fixture
def manager_user(make_user):
    return make_user("manager", role=User.ROLE_MANAGER, first_name="Max", last_name="Manager")


@pytest.fixture
def employee_user(make_user):
    return make_user("employee", first_name="Eve", last_name="Worker")


@pytest.fixture
def other_user(make_user):
    return make_user("other", first_name="Otto", last_name="Other")


@pytest.fixture
def employee(make_employee, employee_user):
    return make_employee(employee_user)


@pytest.fixture
def other_employee(make_employee, other_user):
    return make_employee(other_user)


@pytest.fixture
def manager_employee(make_employee, manager_user):
    return make_employee(manager_user, salary=Decimal("60000"))


@pytest.fixture
def client_for():
    def _client(user=None):
        client = APIClient()
        if user is not None:
            client.force_authenticate(user=user)
        return client
    return _client
