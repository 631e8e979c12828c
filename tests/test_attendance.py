from datetime import date, datetime, timedelta

import pytest
from django.core.exceptions import ValidationError
from django.urls import reverse
from django.utils import timezone

from attendance.models import Attendance, AttendanceRegularizationRequest
from attendance.services import AttendanceService


def local(*args):
    return timezone.make_aware(datetime(*args))


@pytest.mark.django_db
class TestAttendanceService:

    def test_on_time_check_in(self, employee):
        att = AttendanceService.check_in(employee, now=local(2024, 3, 4, 9, 30))
        assert att.status == Attendance.STATUS_PRESENT
        assert att.date == date(2024, 3, 4)

    def test_late_check_in(self, employee):
        att = AttendanceService.check_in(employee, now=local(2024, 3, 4, 10, 5))
        assert att.status == Attendance.STATUS_LATE

    def test_double_check_in(self, employee):
        AttendanceService.check_in(employee, now=local(2024, 3, 4, 9, 0))
        with pytest.raises(ValidationError):
            AttendanceService.check_in(employee, now=local(2024, 3, 4, 9, 5))

    def test_check_out_records_hours(self, employee):
        AttendanceService.check_in(employee, now=local(2024, 3, 4, 9, 0))
        att = AttendanceService.check_out(employee, notes="done",
                                          now=local(2024, 3, 4, 17, 30))
        assert att.work_hours == 8.5
        assert att.notes == "done"

        with pytest.raises(ValidationError):
            AttendanceService.check_out(employee, now=local(2024, 3, 4, 18, 0))

    def test_check_out_without_check_in(self, employee):
        att = AttendanceService.check_out(employee, now=local(2024, 3, 5, 18, 0))
        assert att.check_in is None
        assert att.status == Attendance.STATUS_PRESENT


@pytest.mark.django_db
class TestAttendanceAPI:

    def test_check_in_twice(self, client_for, employee_user, employee):
        client = client_for(employee_user)
        first = client.post(reverse("attendance"), {"action": "checkin", "location": "HQ"})
        assert first.status_code == 201
        assert first.data["check_in_location"] == "HQ"

        second = client.post(reverse("attendance"), {"action": "checkin"})
        assert second.status_code == 400
        assert second.data["detail"] == "Already checked in today"

        out = client.post(reverse("attendance"), {"action": "checkout"})
        assert out.status_code == 200
        assert out.data["check_out"] is not None

    def test_unknown_action(self, client_for, employee_user, employee):
        response = client_for(employee_user).post(reverse("attendance"), {"action": "nap"})
        assert response.status_code == 400

    def test_no_employee_record(self, client_for, admin_user):
        response = client_for(admin_user).post(reverse("attendance"), {"action": "checkin"})
        assert response.status_code == 404

    def test_listing_is_scoped(self, client_for, employee_user, employee, other_employee):
        Attendance.objects.create(employee=employee, date=date(2024, 3, 4))
        Attendance.objects.create(employee=other_employee, date=date(2024, 3, 4))
        client = client_for(employee_user)

        response = client.get(reverse("attendance"), {"month": 3, "year": 2024})
        assert [a["employee"] for a in response.data["results"]] == [employee.pk]

        forbidden = client.get(reverse("attendance"), {"employee": other_employee.pk})
        assert forbidden.status_code == 403

    def test_manager_sees_everyone(self, client_for, manager_user, employee, other_employee):
        Attendance.objects.create(employee=employee, date=date(2024, 3, 4))
        Attendance.objects.create(employee=other_employee, date=date(2024, 3, 4))
        response = client_for(manager_user).get(reverse("attendance"))
        assert response.data["count"] == 2

    def test_bad_month_filter(self, client_for, manager_user):
        response = client_for(manager_user).get(reverse("attendance"), {"month": "march"})
        assert response.status_code == 400
        assert "month" in response.data["detail"]

    def test_manager_correction(self, client_for, manager_user, employee):
        att = Attendance.objects.create(employee=employee, date=date(2024, 3, 4))
        url = reverse("attendance-detail", args=[att.pk])
        client = client_for(manager_user)

        response = client.patch(url, {
            "check_in": "2024-03-04T09:00:00+05:30",
            "check_out": "2024-03-04T18:00:00+05:30",
            "notes": "Forgot to punch",
        }, format="json")
        assert response.status_code == 200
        assert response.data["work_hours"] == 9.0
        assert "Correction by manager: Forgot to punch" in response.data["notes"]

        bad = client.patch(url, {"check_out": "2024-03-04T08:00:00+05:30"}, format="json")
        assert bad.status_code == 400

    def test_correction_is_staff_only(self, client_for, employee_user, employee):
        att = Attendance.objects.create(employee=employee, date=date(2024, 3, 4))
        response = client_for(employee_user).patch(
            reverse("attendance-detail", args=[att.pk]), {"status": "ABSENT"}, format="json")
        assert response.status_code == 403


@pytest.mark.django_db
class TestRegularization:

    def test_request_and_approve(self, client_for, employee_user, manager_user, employee):
        day = timezone.localdate() - timedelta(days=1)
        response = client_for(employee_user).post(reverse("regularization"), {
            "date": day.isoformat(), "reason": "Badge reader was down"})
        assert response.status_code == 201
        assert response.data["status"] == "PENDING"

        duplicate = client_for(employee_user).post(reverse("regularization"), {
            "date": day.isoformat(), "reason": "Badge reader was down"})
        assert duplicate.status_code == 400

        url = reverse("regularization-detail", args=[response.data["id"]])
        approved = client_for(manager_user).put(url, {"status": "APPROVED"}, format="json")
        assert approved.status_code == 200

        att = Attendance.objects.get(employee=employee, date=day)
        assert att.is_regularized
        assert att.regularized_by == manager_user

        again = client_for(manager_user).put(url, {"status": "REJECTED"}, format="json")
        assert again.status_code == 400

    def test_future_date_refused(self, client_for, employee_user, employee):
        day = timezone.localdate() + timedelta(days=2)
        response = client_for(employee_user).post(reverse("regularization"), {
            "date": day.isoformat(), "reason": "Planning ahead"})
        assert response.status_code == 400
        assert not AttendanceRegularizationRequest.objects.exists()

    def test_employees_cannot_review(self, client_for, employee_user, employee):
        obj = AttendanceRegularizationRequest.objects.create(
            employee=employee, date=date(2024, 3, 4), reason="Forgot badge")
        response = client_for(employee_user).put(
            reverse("regularization-detail", args=[obj.pk]), {"status": "APPROVED"},
            format="json")
        assert response.status_code == 403
