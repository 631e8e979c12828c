from decimal import Decimal

import pytest
from django.urls import reverse

from payroll.models import (
    Payroll,
    PayrollAuditLog,
    PayrollCorrectionRequest,
    PayrollCycle,
    PayrollInput,
    Payslip,
    VariablePayEntry,
)
from payroll.calculator import CalculationOptions
from payroll.services import PayrollService, PayslipService

FLAT = {"include_attendance": False, "prorate": False}


@pytest.fixture
def processed(db, admin_user, employee):
    """January 2024 payroll for ``employee`` on a flat 30000 basic."""
    PayrollService.process(
        [employee], 1, 2024, admin_user,
        options=CalculationOptions(include_attendance=False, prorate=False))
    return Payroll.objects.get(employee=employee, month=1, year=2024)


@pytest.mark.django_db
class TestCalculateAndProcess:

    def test_preview(self, client_for, manager_user, employee):
        response = client_for(manager_user).post(reverse("payroll-calculate"), {
            "employee_id": employee.pk, "month": 1, "year": 2024, **FLAT}, format="json")
        assert response.status_code == 200
        assert response.data["employee"]["employee_id"] == employee.employee_id
        assert response.data["calculation"]["net_salary"] == "39092"
        assert response.data["calculation"]["working_days"] == 23
        assert response.data["validation"]["is_valid"] is True
        assert not Payroll.objects.exists()

    def test_preview_is_staff_only(self, client_for, employee_user, employee):
        response = client_for(employee_user).post(reverse("payroll-calculate"), {
            "employee_id": employee.pk, "month": 1, "year": 2024}, format="json")
        assert response.status_code == 403

    def test_process(self, client_for, admin_user, employee):
        response = client_for(admin_user).post(reverse("payroll-process"), {
            "month": 1, "year": 2024, **FLAT}, format="json")
        assert response.status_code == 200
        assert response.data["processed"] == 1
        assert response.data["error_count"] == 0
        assert response.data["summary"]["total_net_salary"] == "39092"

        payroll = Payroll.objects.get(employee=employee, month=1, year=2024)
        assert payroll.status == Payroll.STATUS_PROCESSED
        assert payroll.net_salary == Decimal("39092")
        assert payroll.allowances == Decimal("12000")
        assert payroll.input.status == PayrollInput.STATUS_PROCESSED
        assert PayrollCycle.objects.get(month=1, year=2024).status == \
            PayrollCycle.STATUS_IN_PROGRESS
        assert PayrollAuditLog.objects.filter(
            action="PAYROLL_PROCESSED", payroll=payroll).exists()

    def test_process_includes_approved_variable_pay(self, client_for, admin_user, employee):
        VariablePayEntry.objects.create(
            employee=employee, month=1, year=2024, type="COMMISSION",
            amount=Decimal("1000"), status="APPROVED")
        VariablePayEntry.objects.create(
            employee=employee, month=1, year=2024, type="COMMISSION",
            amount=Decimal("5000"))
        client_for(admin_user).post(reverse("payroll-process"), {
            "month": 1, "year": 2024, **FLAT}, format="json")
        assert PayrollInput.objects.get(employee=employee).variable_pay == Decimal("1000")

    def test_paid_payroll_is_left_alone(self, client_for, admin_user, employee):
        Payroll.objects.create(employee=employee, month=1, year=2024,
                               net_salary=Decimal("1"), status=Payroll.STATUS_PAID)
        response = client_for(admin_user).post(reverse("payroll-process"), {
            "month": 1, "year": 2024, **FLAT}, format="json")
        assert response.data["processed"] == 0
        assert response.data["errors"][0]["errors"] == ["Payroll already paid for this period"]
        assert Payroll.objects.get(employee=employee).net_salary == Decimal("1")

    def test_locked_cycle_refused(self, client_for, admin_user, employee):
        PayrollCycle.objects.create(month=1, year=2024, status=PayrollCycle.STATUS_LOCKED)
        response = client_for(admin_user).post(reverse("payroll-process"), {
            "month": 1, "year": 2024}, format="json")
        assert response.status_code == 400
        assert not Payroll.objects.exists()

    def test_no_matching_employees(self, client_for, admin_user, employee):
        response = client_for(admin_user).post(reverse("payroll-process"), {
            "month": 1, "year": 2024, "employee_ids": [employee.pk + 100]}, format="json")
        assert response.status_code == 404

    def test_process_is_admin_only(self, client_for, manager_user, employee):
        response = client_for(manager_user).post(reverse("payroll-process"), {
            "month": 1, "year": 2024}, format="json")
        assert response.status_code == 403

    def test_month_out_of_range(self, client_for, admin_user, employee):
        response = client_for(admin_user).post(reverse("payroll-process"), {
            "month": 13, "year": 2024}, format="json")
        assert response.status_code == 400


@pytest.mark.django_db
class TestPayrollRecords:

    def test_employee_sees_only_own(self, client_for, employee_user, other_employee, processed):
        Payroll.objects.create(employee=other_employee, month=1, year=2024)
        response = client_for(employee_user).get(reverse("payroll-list"))
        assert [p["id"] for p in response.data["results"]] == [processed.pk]

    def test_filters_by_month(self, client_for, admin_user, processed):
        client = client_for(admin_user)
        assert client.get(reverse("payroll-list"), {"month": "1"}).data["count"] == 1
        assert client.get(reverse("payroll-list"), {"month": "2"}).data["count"] == 0
        assert client.get(reverse("payroll-list"), {"month": ""}).data["count"] == 1

    @pytest.mark.parametrize("url_name, params", [
        ("payroll-list", {"month": "abc"}),
        ("payroll-list", {"employee": "x"}),
        ("payroll-list", {"month": "13"}),
        ("payroll-inputs", {"year": "20x4"}),
        ("payroll-cycles", {"year": "soon"}),
        ("payroll-dashboard", {"month": "abc"}),
    ])
    def test_bad_numeric_filters_are_400(self, client_for, admin_user, url_name, params):
        response = client_for(admin_user).get(reverse(url_name), params)
        assert response.status_code == 400
        assert next(iter(params)) in response.data["detail"]

    def test_detail_has_breakdown(self, client_for, employee_user, processed):
        response = client_for(employee_user).get(
            reverse("payroll-detail", args=[processed.pk]))
        assert response.status_code == 200
        assert response.data["breakdown"]["hra"] == "12000.00"

    def test_detail_forbidden_for_others(self, client_for, other_user, other_employee, processed):
        response = client_for(other_user).get(reverse("payroll-detail", args=[processed.pk]))
        assert response.status_code == 403

    def test_mark_paid_then_no_revert(self, client_for, admin_user, processed):
        client = client_for(admin_user)
        url = reverse("payroll-detail", args=[processed.pk])

        response = client.patch(url, {"status": "PAID"}, format="json")
        assert response.status_code == 200
        assert response.data["paid_at"] is not None

        response = client.patch(url, {"status": "PROCESSED"}, format="json")
        assert response.status_code == 400

    def test_status_change_is_admin_only(self, client_for, manager_user, processed):
        response = client_for(manager_user).patch(
            reverse("payroll-detail", args=[processed.pk]), {"status": "PAID"}, format="json")
        assert response.status_code == 403

    def test_processed_input_is_immutable(self, client_for, manager_user, processed):
        response = client_for(manager_user).patch(
            reverse("payroll-input-detail", args=[processed.input.pk]),
            {"status": "APPROVED"}, format="json")
        assert response.status_code == 400


@pytest.mark.django_db
class TestCycles:

    def test_create_seeds_draft_payrolls(self, client_for, admin_user, employee, other_employee):
        client = client_for(admin_user)
        response = client.post(reverse("payroll-cycles"), {"month": 3, "year": 2024},
                               format="json")
        assert response.status_code == 201
        assert response.data["payrolls_created"] == 2
        assert response.data["status"] == PayrollCycle.STATUS_DRAFT
        assert Payroll.objects.filter(month=3, year=2024, status="DRAFT").count() == 2

        duplicate = client.post(reverse("payroll-cycles"), {"month": 3, "year": 2024},
                                format="json")
        assert duplicate.status_code == 400

    def test_list_counts(self, client_for, admin_user, processed):
        response = client_for(admin_user).get(reverse("payroll-cycles"))
        cycle = response.data["results"][0]
        assert cycle["employee_count"] == 1
        assert Decimal(cycle["total_net"]) == Decimal("39092")

    def test_delete_draft_only(self, client_for, admin_user, employee):
        client = client_for(admin_user)
        cycle_id = client.post(reverse("payroll-cycles"), {"month": 4, "year": 2024},
                               format="json").data["id"]
        url = reverse("payroll-cycle-detail", args=[cycle_id])

        assert client.patch(url, {"status": "IN_PROGRESS"}, format="json").status_code == 200
        assert client.delete(url).status_code == 400

        PayrollCycle.objects.filter(pk=cycle_id).update(status="DRAFT")
        assert client.delete(url).status_code == 204
        assert not Payroll.objects.filter(month=4, year=2024).exists()

    def test_locked_cycle_is_immutable(self, client_for, admin_user):
        cycle = PayrollCycle.objects.create(month=5, year=2024, status="LOCKED")
        response = client_for(admin_user).patch(
            reverse("payroll-cycle-detail", args=[cycle.pk]), {"notes": "x"}, format="json")
        assert response.status_code == 400

    def test_cycles_are_admin_only(self, client_for, manager_user):
        assert client_for(manager_user).get(reverse("payroll-cycles")).status_code == 403


@pytest.mark.django_db
class TestVariablePay:

    def _submit(self, client, employee, amount="2500"):
        return client.post(reverse("variable-pay"), {
            "employee": employee.pk, "month": 1, "year": 2024,
            "type": "PERFORMANCE_BONUS", "amount": amount}, format="json")

    def test_submit_and_approve(self, client_for, manager_user, admin_user, employee):
        response = self._submit(client_for(manager_user), employee)
        assert response.status_code == 201
        assert response.data["status"] == "PENDING"
        assert response.data["submitted_by"] == manager_user.pk

        url = reverse("variable-pay-detail", args=[response.data["id"]])
        client = client_for(admin_user)
        approved = client.put(url, {"status": "APPROVED"}, format="json")
        assert approved.status_code == 200
        assert approved.data["approved_by"] == admin_user.pk
        assert PayrollAuditLog.objects.filter(action="VARIABLE_PAY_ENTRY_APPROVED").exists()

        again = client.put(url, {"status": "REJECTED", "rejection_reason": "late"},
                           format="json")
        assert again.status_code == 400
        assert again.data["current_status"] == "APPROVED"

    def test_reject_needs_reason(self, client_for, manager_user, employee):
        client = client_for(manager_user)
        entry_id = self._submit(client, employee).data["id"]
        response = client.put(reverse("variable-pay-detail", args=[entry_id]),
                              {"status": "REJECTED"}, format="json")
        assert response.status_code == 400

    def test_amount_must_be_positive(self, client_for, manager_user, employee):
        assert self._submit(client_for(manager_user), employee, amount="0").status_code == 400

    def test_employees_cannot_submit(self, client_for, employee_user, employee):
        assert self._submit(client_for(employee_user), employee).status_code == 403


@pytest.mark.django_db
class TestPayslips:

    def test_generate_and_download(self, client_for, admin_user, employee_user, processed):
        admin = client_for(admin_user)
        response = admin.post(reverse("payslips"), {"month": 1, "year": 2024}, format="json")
        assert response.status_code == 201
        assert response.data["generated"] == 1
        payslip = response.data["payslips"][0]
        assert payslip["file_name"] == f"payslip-{processed.employee.employee_id}-2024-01.pdf"

        again = admin.post(reverse("payslips"), {"month": 1, "year": 2024}, format="json")
        assert again.status_code == 200
        assert again.data["skipped"] == 1

        download = client_for(employee_user).get(
            reverse("payslip-download", args=[payslip["id"]]))
        assert download.status_code == 200
        assert download["Content-Type"] == "application/pdf"
        assert download.content.startswith(b"%PDF")
        assert Payslip.objects.get(pk=payslip["id"]).status == Payslip.STATUS_DOWNLOADED

    def test_draft_payrolls_are_skipped(self, client_for, admin_user, employee):
        Payroll.objects.create(employee=employee, month=2, year=2024, status="DRAFT")
        response = client_for(admin_user).post(
            reverse("payslips"), {"month": 2, "year": 2024}, format="json")
        assert response.data["generated"] == 0
        assert response.data["skipped"] == 1

    def test_needs_period_or_payroll(self, client_for, admin_user):
        response = client_for(admin_user).post(reverse("payslips"), {}, format="json")
        assert response.status_code == 400

    def test_others_cannot_download(self, client_for, admin_user, other_user,
                                    other_employee, processed):
        created, _ = PayslipService.generate([processed], admin_user)
        response = client_for(other_user).get(
            reverse("payslip-download", args=[created[0].pk]))
        assert response.status_code == 403


@pytest.mark.django_db
class TestCorrections:

    def test_raise_and_review(self, client_for, employee_user, manager_user, processed):
        response = client_for(employee_user).post(reverse("payroll-corrections"), {
            "payroll": processed.pk, "type": "DEDUCTION_ERROR",
            "description": "Tax looks too high this month."}, format="json")
        assert response.status_code == 201
        assert response.data["employee"] == processed.employee_id
        assert PayrollAuditLog.objects.filter(action="CORRECTION_REQUEST_CREATED").exists()

        url = reverse("payroll-correction-detail", args=[response.data["id"]])
        manager = client_for(manager_user)
        resolved = manager.put(url, {"status": "RESOLVED", "resolution": "Recomputed"},
                               format="json")
        assert resolved.status_code == 200
        assert resolved.data["reviewed_by"] == manager_user.pk

        assert manager.put(url, {"status": "REJECTED"}, format="json").status_code == 400

    def test_only_own_payroll(self, client_for, other_user, other_employee, processed):
        response = client_for(other_user).post(reverse("payroll-corrections"), {
            "payroll": processed.pk, "type": "OTHER",
            "description": "This is not even mine."}, format="json")
        assert response.status_code == 403
        assert not PayrollCorrectionRequest.objects.exists()

    def test_description_too_short(self, client_for, employee_user, processed):
        response = client_for(employee_user).post(reverse("payroll-corrections"), {
            "payroll": processed.pk, "type": "OTHER", "description": "wrong"}, format="json")
        assert response.status_code == 400


@pytest.mark.django_db
class TestDashboardAndExport:

    def test_dashboards_by_role(self, client_for, admin_user, employee_user, processed):
        admin = client_for(admin_user).get(reverse("payroll-dashboard"), {"month": 1, "year": 2024})
        assert admin.data["role"] == "admin"
        assert admin.data["status_counts"] == {"PROCESSED": 1}

        own = client_for(employee_user).get(reverse("payroll-dashboard"), {"year": 2024})
        assert own.data["role"] == "employee"
        assert own.data["latest_payroll"]["id"] == processed.pk
        assert Decimal(own.data["year_to_date_net"]) == Decimal("39092")

    def test_export_payroll_summary(self, client_for, admin_user, processed):
        url = reverse("payroll-export") + "?format=payroll-summary&month=1&year=2024"
        response = client_for(admin_user).get(url)

        assert response.status_code == 200
        assert response["Content-Type"] == "text/csv"
        assert 'filename="payroll-summary-2024-01.csv"' in response["Content-Disposition"]
        lines = response.content.decode().splitlines()
        assert lines[0].startswith("Employee ID,Employee Name,Department")
        assert len(lines) == 2
        assert processed.employee.employee_id in lines[1]
        assert PayrollAuditLog.objects.filter(action="PAYROLL_EXPORT").exists()

    def test_export_unknown_format(self, client_for, admin_user):
        url = reverse("payroll-export") + "?format=everything&month=1&year=2024"
        assert client_for(admin_user).get(url).status_code == 400

    def test_export_is_admin_only(self, client_for, manager_user):
        url = reverse("payroll-export") + "?format=corrections&month=1&year=2024"
        assert client_for(manager_user).get(url).status_code == 403
