from types import SimpleNamespace

import pytest
from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework.test import APIClient

from accounts.permissions import IsAdmin, IsManagerOrAdmin, RolePermission

User = get_user_model()


@pytest.mark.django_db
class TestLogin:

    def test_login_returns_role_redirect(self, manager_user):
        response = APIClient().post(reverse("token_obtain_pair"), {
            "username": "manager", "password": "pass12345!"})
        assert response.status_code == 200
        assert response.data["role"] == "manager"
        assert response.data["redirect_url"] == "/dashboard/manager"
        assert "access" in response.data and "refresh" in response.data

    def test_bad_password(self, manager_user):
        response = APIClient().post(reverse("token_obtain_pair"), {
            "username": "manager", "password": "wrong"})
        assert response.status_code == 401

    def test_token_authenticates(self, employee_user, employee):
        tokens = APIClient().post(reverse("token_obtain_pair"), {
            "username": "employee", "password": "pass12345!"}).data
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")
        response = client.get(reverse("me"))
        assert response.status_code == 200
        assert response.data["employee"]["employee_id"] == employee.employee_id


@pytest.mark.django_db
class TestMe:

    def test_user_without_employee_record(self, client_for, admin_user):
        response = client_for(admin_user).get(reverse("me"))
        assert response.status_code == 200
        assert response.data["role"] == "admin"
        assert response.data["employee"] is None

    def test_anonymous(self):
        assert APIClient().get(reverse("me")).status_code == 401


@pytest.mark.django_db
class TestRegister:

    def test_admin_registers(self, client_for, admin_user):
        response = client_for(admin_user).post(reverse("register"), {
            "username": "newmanager", "email": "NewManager@Example.com",
            "password": "Str0ng-passphrase", "role": "manager"})
        assert response.status_code == 201
        user = User.objects.get(username="newmanager")
        assert user.email == "newmanager@example.com"
        assert user.check_password("Str0ng-passphrase")
        assert "password" not in response.data

    def test_weak_password(self, client_for, admin_user):
        response = client_for(admin_user).post(reverse("register"), {
            "username": "weak", "email": "weak@example.com", "password": "123"})
        assert response.status_code == 400
        assert "password" in response.data

    def test_duplicate_username(self, client_for, admin_user, employee_user):
        response = client_for(admin_user).post(reverse("register"), {
            "username": "EMPLOYEE", "email": "x@example.com",
            "password": "Str0ng-passphrase"})
        assert response.status_code == 400

    def test_manager_cannot_register(self, client_for, manager_user):
        response = client_for(manager_user).post(reverse("register"), {
            "username": "x", "email": "x@example.com", "password": "Str0ng-passphrase"})
        assert response.status_code == 403


@pytest.mark.django_db
class TestManagersAdmins:

    def test_lists_active_staff(self, client_for, manager_user, admin_user, employee_user,
                                make_user):
        make_user("gone", role="manager", is_active=False)
        response = client_for(manager_user).get(reverse("managers-admins"))
        assert response.status_code == 200
        assert {u["username"] for u in response.data} == {"admin", "manager"}

    def test_employees_refused(self, client_for, employee_user):
        assert client_for(employee_user).get(reverse("managers-admins")).status_code == 403


class TestRolePermissions:

    def check(self, permission_class, role):
        user = SimpleNamespace(id=1, role=role, is_authenticated=True)
        request = SimpleNamespace(user=user, path="/api/")
        return permission_class().has_permission(request, None)

    def test_admin(self):
        assert self.check(IsAdmin, "ADMIN")
        assert not self.check(IsAdmin, "manager")

    def test_custom_roles(self):
        class IsEmployeeOnly(RolePermission):
            required_roles = ("employee",)

        assert self.check(IsEmployeeOnly, "Employee")
        assert not self.check(IsEmployeeOnly, "manager")

    def test_manager_or_admin(self):
        assert self.check(IsManagerOrAdmin, "admin")
        assert self.check(IsManagerOrAdmin, "manager")
        assert not self.check(IsManagerOrAdmin, "employee")

    def test_anonymous_is_refused(self):
        request = SimpleNamespace(user=SimpleNamespace(is_authenticated=False), path="/")
        assert not IsAdmin().has_permission(request, None)
