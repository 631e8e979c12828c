from datetime import date

import pytest
from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework.test import APIClient

from employees.models import Employee
from onboarding.models import OnboardingStep, OnboardingSubmission
from onboarding.services import OnboardingService

User = get_user_model()

STEP_PAYLOADS = {
    OnboardingStep.PERSONAL_INFORMATION: {
        "first_name": "Nia",
        "last_name": "Newton",
        "date_of_birth": "1995-04-02",
        "phone_number": "9876543210",
        "address": "12 MG Road, Bengaluru",
        "emergency_contact_name": "Ravi Newton",
        "emergency_contact_phone": "9876500000",
        "emergency_contact_relation": "Brother",
    },
    OnboardingStep.DOCUMENTS: {
        "documents": [{"name": "PAN", "reference": "uploads/pan.pdf", "number": "ABCDE1234F"}],
    },
    OnboardingStep.PREVIOUS_EMPLOYMENT: {"companies": []},
    OnboardingStep.BANKING_DETAILS: {
        "bank_name": "State Bank",
        "ifsc_code": "SBIN0000001",
        "account_number": "1234567890",
        "confirm_account_number": "1234567890",
        "branch": "MG Road",
    },
    OnboardingStep.BACKGROUND_VERIFICATION: {"consent_for_verification": True},
}


@pytest.fixture
def submission(admin_user, department):
    return OnboardingService.create({
        "email": "nia@example.com",
        "username": "nia",
        "password": "welcome123",
        "name": "Nia Newton",
        "department": department,
        "position": "Analyst",
        "employment_type": "FULL_TIME",
        "date_of_joining": date(2024, 7, 1),
        "salary": 45000,
        "pay_frequency": "MONTHLY",
    }, admin_user)


@pytest.fixture
def hire_client(submission):
    response = APIClient().post(reverse("onboarding-login"), {
        "username": "nia", "password": "welcome123"})
    assert response.status_code == 200
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
    return client


def step_of(submission, step_type):
    return submission.steps.get(step_type=step_type)


@pytest.mark.django_db
class TestCreate:

    def test_manager_creates(self, client_for, manager_user, department):
        response = client_for(manager_user).post(reverse("onboarding-create"), {
            "email": "New.Hire@Example.com", "username": "newhire",
            "password": "welcome123", "name": "  New   Hire ",
            "department": department.pk, "position": "Designer",
            "employment_type": "FULL_TIME", "date_of_joining": "2024-07-01",
            "salary": "40000", "pay_frequency": "MONTHLY"}, format="json")
        assert response.status_code == 201
        assert response.data["status"] == "CREATED"
        assert response.data["email"] == "new.hire@example.com"
        assert [s["step_type"] for s in response.data["steps"]] == [
            "PERSONAL_INFORMATION", "DOCUMENTS", "PREVIOUS_EMPLOYMENT",
            "BANKING_DETAILS", "BACKGROUND_VERIFICATION"]
        assert response.data["progress"] == 0

        user = User.objects.get(username="newhire")
        assert not user.is_active
        assert (user.first_name, user.last_name) == ("New", "Hire")
        assert user.role == User.ROLE_EMPLOYEE

    def test_duplicate_email(self, client_for, admin_user, department, employee_user):
        response = client_for(admin_user).post(reverse("onboarding-create"), {
            "email": employee_user.email, "username": "someone", "password": "welcome123",
            "name": "Some One", "department": department.pk, "position": "x",
            "employment_type": "FULL_TIME", "date_of_joining": "2024-07-01",
            "salary": "40000", "pay_frequency": "MONTHLY"}, format="json")
        assert response.status_code == 400
        assert "email" in response.data

    def test_employees_cannot_create(self, client_for, employee_user):
        assert client_for(employee_user).post(
            reverse("onboarding-create"), {}, format="json").status_code == 403


@pytest.mark.django_db
class TestLogin:

    def test_wrong_password(self, submission):
        response = APIClient().post(reverse("onboarding-login"), {
            "username": "nia", "password": "nope"})
        assert response.status_code == 401

    def test_no_onboarding_in_progress(self, employee_user):
        response = APIClient().post(reverse("onboarding-login"), {
            "username": employee_user.username, "password": "pass12345!"})
        assert response.status_code == 403

    def test_inactive_user_cannot_use_regular_login(self, submission):
        response = APIClient().post(reverse("token_obtain_pair"), {
            "username": "nia", "password": "welcome123"})
        assert response.status_code == 401

    def test_my_status(self, hire_client, submission):
        response = hire_client.get(reverse("onboarding-my-status"))
        assert response.status_code == 200
        assert response.data["id"] == submission.pk

    def test_onboarding_token_is_limited_to_onboarding(self, hire_client):
        assert hire_client.get(reverse("me")).status_code == 401


@pytest.mark.django_db
class TestSteps:

    def test_submit_step(self, hire_client, submission):
        step = step_of(submission, OnboardingStep.BANKING_DETAILS)
        response = hire_client.put(
            reverse("onboarding-step", args=[step.pk]),
            {"step_data": STEP_PAYLOADS[OnboardingStep.BANKING_DETAILS]}, format="json")
        assert response.status_code == 200
        assert response.data["status"] == "SUBMITTED"
        assert "confirm_account_number" not in response.data["step_data"]
        assert response.data["step_data"]["account_type"] == "SAVINGS"

        submission.refresh_from_db()
        assert submission.status == OnboardingSubmission.STATUS_IN_PROGRESS

    def test_invalid_payload(self, hire_client, submission):
        step = step_of(submission, OnboardingStep.BANKING_DETAILS)
        payload = dict(STEP_PAYLOADS[OnboardingStep.BANKING_DETAILS],
                       confirm_account_number="999")
        response = hire_client.put(
            reverse("onboarding-step", args=[step.pk]), {"step_data": payload}, format="json")
        assert response.status_code == 400
        assert "step_data" in response.data

    def test_past_employer_needs_reason(self, hire_client, submission):
        step = step_of(submission, OnboardingStep.PREVIOUS_EMPLOYMENT)
        payload = {"companies": [{
            "company_name": "Acme", "job_title": "Intern",
            "start_date": "2022-01-01", "end_date": "2022-06-30"}]}
        response = hire_client.put(
            reverse("onboarding-step", args=[step.pk]), {"step_data": payload}, format="json")
        assert response.status_code == 400

    def test_other_users_step(self, client_for, employee_user, submission):
        step = step_of(submission, OnboardingStep.DOCUMENTS)
        response = client_for(employee_user).get(reverse("onboarding-step", args=[step.pk]))
        assert response.status_code == 403

    def test_review_requires_submission(self, client_for, manager_user, submission):
        step = step_of(submission, OnboardingStep.DOCUMENTS)
        response = client_for(manager_user).post(
            reverse("onboarding-step-review", args=[step.pk]), {"status": "APPROVED"},
            format="json")
        assert response.status_code == 400

    def test_reject_needs_reason(self, client_for, manager_user, hire_client, submission):
        step = step_of(submission, OnboardingStep.DOCUMENTS)
        hire_client.put(reverse("onboarding-step", args=[step.pk]),
                        {"step_data": STEP_PAYLOADS[OnboardingStep.DOCUMENTS]}, format="json")
        url = reverse("onboarding-step-review", args=[step.pk])
        client = client_for(manager_user)

        assert client.post(url, {"status": "REJECTED"}, format="json").status_code == 400
        response = client.post(url, {"status": "REJECTED", "rejection_reason": "Blurry scan"},
                               format="json")
        assert response.status_code == 200
        assert response.data["status"] == "REJECTED"

        resubmit = hire_client.put(reverse("onboarding-step", args=[step.pk]),
                                   {"step_data": STEP_PAYLOADS[OnboardingStep.DOCUMENTS]},
                                   format="json")
        assert resubmit.data["status"] == "SUBMITTED"


@pytest.mark.django_db
class TestCompletion:

    def test_all_steps_approved_creates_employee(self, client_for, manager_user,
                                                 hire_client, submission):
        reviewer = client_for(manager_user)
        last = None
        for step in submission.steps.all():
            submitted = hire_client.put(
                reverse("onboarding-step", args=[step.pk]),
                {"step_data": STEP_PAYLOADS[step.step_type]}, format="json")
            assert submitted.status_code == 200
            last = reviewer.post(reverse("onboarding-step-review", args=[step.pk]),
                                 {"status": "APPROVED"}, format="json")
            assert last.status_code == 200

        assert last.data["submission_status"] == "COMPLETED"

        submission.refresh_from_db()
        employee = Employee.objects.get(user=submission.user)
        assert last.data["employee"] == employee.pk
        assert submission.employee == employee
        assert submission.user.is_active
        assert employee.first_name == "Nia"
        assert employee.date_of_birth == date(1995, 4, 2)
        assert employee.emergency_contact == "Ravi Newton"
        assert employee.hire_date == date(2024, 7, 1)
        assert employee.employee_id.startswith("EMP-")

        detail = reviewer.get(reverse("onboarding-submission-detail", args=[submission.pk]))
        assert detail.data["progress"] == 100

    def test_approved_step_is_frozen(self, client_for, manager_user, hire_client, submission):
        step = step_of(submission, OnboardingStep.BACKGROUND_VERIFICATION)
        url = reverse("onboarding-step", args=[step.pk])
        hire_client.put(url, {"step_data": {"consent_for_verification": True}}, format="json")
        client_for(manager_user).post(reverse("onboarding-step-review", args=[step.pk]),
                                      {"status": "APPROVED"}, format="json")

        response = hire_client.put(
            url, {"step_data": {"consent_for_verification": True}}, format="json")
        assert response.status_code == 400

    def test_cancel(self, client_for, admin_user, hire_client, submission):
        client = client_for(admin_user)
        url = reverse("onboarding-submission-cancel", args=[submission.pk])
        assert client.post(url).data["status"] == "CANCELLED"
        assert client.post(url).status_code == 400

        step = step_of(submission, OnboardingStep.DOCUMENTS)
        response = hire_client.put(
            reverse("onboarding-step", args=[step.pk]),
            {"step_data": STEP_PAYLOADS[OnboardingStep.DOCUMENTS]}, format="json")
        assert response.status_code == 400

    def test_cancelled_onboarding_cannot_complete(self, client_for, manager_user, admin_user,
                                                  submission):
        for step in submission.steps.all():
            OnboardingService.submit_step(step, STEP_PAYLOADS[step.step_type])
        OnboardingService.cancel(submission, admin_user)

        reviewer = client_for(manager_user)
        for step in submission.steps.all():
            response = reviewer.post(reverse("onboarding-step-review", args=[step.pk]),
                                     {"status": "APPROVED"}, format="json")
            assert response.status_code == 400

        submission.refresh_from_db()
        submission.user.refresh_from_db()
        assert submission.status == OnboardingSubmission.STATUS_CANCELLED
        assert not submission.user.is_active
        assert not Employee.objects.filter(user=submission.user).exists()
        assert not submission.steps.filter(status=OnboardingStep.STATUS_APPROVED).exists()


@pytest.mark.django_db
class TestListingAndBackfill:

    def test_list_filters_by_status(self, client_for, manager_user, submission):
        client = client_for(manager_user)
        assert client.get(reverse("onboarding-submissions")).data["count"] == 1
        assert client.get(reverse("onboarding-submissions"),
                          {"status": "COMPLETED"}).data["count"] == 0

    def test_backfill(self, client_for, admin_user, employee, other_employee):
        client = client_for(admin_user)
        response = client.post(reverse("onboarding-backfill"))
        assert response.status_code == 200
        assert response.data["created"] == 2
        submission = OnboardingSubmission.objects.get(employee=employee)
        assert submission.status == OnboardingSubmission.STATUS_CREATED
        assert set(submission.steps.values_list("status", flat=True)) == {"PENDING"}
        assert submission.steps.count() == 5

        again = client.post(reverse("onboarding-backfill"))
        assert again.data["created"] == 0

    def test_backfill_is_admin_only(self, client_for, manager_user):
        assert client_for(manager_user).post(reverse("onboarding-backfill")).status_code == 403
