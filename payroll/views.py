# payroll/views.py
import logging

from django.core.exceptions import ValidationError
from django.db.models import Count, Sum
from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdmin, IsManagerOrAdmin, is_admin, is_manager_or_admin
from employees.models import Employee
from employees.query import parse_filters
from employees.utils import get_employee_or_none
from .calculator import CalculationOptions
from .exports import build_export, export_filename
from .models import (
    Payroll,
    PayrollAuditLog,
    PayrollCorrectionRequest,
    PayrollCycle,
    PayrollInput,
    Payslip,
    VariablePayEntry,
)
from .pdf import render_payslip
from .serializers import (
    CorrectionRequestSerializer,
    CorrectionReviewSerializer,
    ExportQuerySerializer,
    PayrollAuditLogSerializer,
    PayrollCalculateSerializer,
    PayrollCycleCreateSerializer,
    PayrollCycleSerializer,
    PayrollCycleUpdateSerializer,
    PayrollInputSerializer,
    PayrollInputUpdateSerializer,
    PayrollProcessSerializer,
    PayrollSerializer,
    PayrollStatusSerializer,
    PayslipGenerateSerializer,
    PayslipSerializer,
    VariablePayDecisionSerializer,
    VariablePayEntrySerializer,
)
from .services import (
    CorrectionService,
    PayrollCycleService,
    PayrollInputService,
    PayrollService,
    PayslipService,
    VariablePayService,
    audit,
    result_to_json,
)

logger = logging.getLogger(__name__)

NOT_ALLOWED = {"detail": "Not allowed"}


def _options(data):
    return CalculationOptions(
        include_variable_pay=data['include_variable_pay'],
        include_attendance=data['include_attendance'],
        include_statutory_deductions=data['include_statutory_deductions'],
        prorate=data['prorate'],
    )


def _scoped(qs, request, filters=('month', 'year', 'status')):
    """
    Managers and admins see every row (optionally ?employee=), everyone
    else only their own.
    """
    params = request.query_params
    numeric = parse_filters(params)
    if is_manager_or_admin(request.user):
        if numeric.get('employee'):
            qs = qs.filter(employee_id=numeric['employee'])
    else:
        own = get_employee_or_none(request.user)
        if own is None:
            return qs.none()
        qs = qs.filter(employee=own)

    for name in filters:
        value = numeric.get(name, params.get(name))
        if value:
            qs = qs.filter(**{name: value})
    return qs


def _can_view(user, obj):
    return is_manager_or_admin(user) or obj.employee.user_id == user.id


class PayrollCalculateAPIView(APIView):
    permission_classes = [IsAuthenticated, IsManagerOrAdmin]

    def post(self, request):
        serializer = PayrollCalculateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        employee = data['employee']

        result, errors, warnings = PayrollService.preview(
            employee, data['month'], data['year'], _options(data))

        return Response({
            "employee": {
                "id": employee.id,
                "employee_id": employee.employee_id,
                "name": employee.full_name(),
            },
            "month": data['month'],
            "year": data['year'],
            "calculation": result_to_json(result),
            "validation": {
                "is_valid": not errors,
                "errors": errors,
                "warnings": warnings,
            },
        })


class PayrollProcessAPIView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    def post(self, request):
        serializer = PayrollProcessSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        employees = Employee.objects.filter(is_active=True).select_related('department')
        if data.get('employee_ids'):
            employees = employees.filter(id__in=data['employee_ids'])
        if not employees.exists():
            return Response({"detail": "No active employees found."}, status=404)

        try:
            outcome = PayrollService.process(
                employees, data['month'], data['year'], request.user,
                options=_options(data), request=request)
        except ValidationError as e:
            return Response({"detail": e.messages[0]}, status=400)

        logger.info("Payroll run %s-%02d: processed=%s errors=%s by user=%s",
                    data['year'], data['month'], outcome['processed'],
                    outcome['error_count'], request.user.id)
        return Response(outcome)


class PayrollListAPIView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PayrollSerializer

    def get_queryset(self):
        qs = Payroll.objects.select_related('employee', 'employee__department')
        return _scoped(qs, self.request).order_by('-year', '-month', 'employee__first_name')


class PayrollDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        payroll = get_object_or_404(
            Payroll.objects.select_related('employee', 'employee__department'), pk=pk)
        if not _can_view(request.user, payroll):
            return Response(NOT_ALLOWED, status=403)

        data = PayrollSerializer(payroll).data
        breakdown = PayrollInput.objects.filter(payroll=payroll).first()
        data['breakdown'] = PayrollInputSerializer(breakdown).data if breakdown else None
        return Response(data)

    def patch(self, request, pk):
        if not is_admin(request.user):
            return Response(NOT_ALLOWED, status=403)

        payroll = get_object_or_404(Payroll, pk=pk)
        serializer = PayrollStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            PayrollService.set_status(
                payroll, serializer.validated_data['status'], request.user, request=request)
        except ValidationError as e:
            return Response({"detail": e.messages[0]}, status=400)
        return Response(PayrollSerializer(payroll).data)


class PayrollCycleListCreateAPIView(generics.ListAPIView):
    permission_classes = [IsAuthenticated, IsAdmin]
    serializer_class = PayrollCycleSerializer

    def get_queryset(self):
        qs = PayrollCycle.objects.select_related('created_by')
        params = self.request.query_params
        numeric = parse_filters(params)
        for name in ('month', 'year', 'status'):
            value = numeric.get(name, params.get(name))
            if value:
                qs = qs.filter(**{name: value})
        return qs.order_by('-year', '-month')

    def list(self, request, *args, **kwargs):
        cycles = list(self.get_queryset())
        totals = {
            (row['month'], row['year']): row
            for row in Payroll.objects.values('month', 'year').annotate(
                employee_count=Count('employee', distinct=True),
                total_net=Sum('net_salary'),
            )
        }
        for cycle in cycles:
            row = totals.get((cycle.month, cycle.year), {})
            cycle.employee_count = row.get('employee_count', 0)
            cycle.total_net = row.get('total_net') or 0

        page = self.paginate_queryset(cycles)
        if page is not None:
            return self.get_paginated_response(
                PayrollCycleSerializer(page, many=True).data)
        return Response(PayrollCycleSerializer(cycles, many=True).data)

    def post(self, request):
        serializer = PayrollCycleCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            cycle, created = PayrollCycleService.create_cycle(
                data['month'], data['year'], request.user,
                notes=data.get('notes', ''), request=request)
        except ValidationError as e:
            return Response({"detail": e.messages[0]}, status=400)

        cycle.employee_count = created
        cycle.total_net = 0
        return Response(
            {**PayrollCycleSerializer(cycle).data, "payrolls_created": created},
            status=status.HTTP_201_CREATED)


class PayrollCycleDetailAPIView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    def get(self, request, pk):
        cycle = get_object_or_404(PayrollCycle, pk=pk)
        payrolls = Payroll.objects.filter(
            month=cycle.month, year=cycle.year
        ).select_related('employee', 'employee__department')

        by_status = {
            row['status']: row['count']
            for row in payrolls.values('status').annotate(count=Count('id'))
        }
        cycle.employee_count = payrolls.count()
        cycle.total_net = payrolls.aggregate(total=Sum('net_salary'))['total'] or 0

        return Response({
            **PayrollCycleSerializer(cycle).data,
            "status_counts": by_status,
            "payrolls": PayrollSerializer(payrolls, many=True).data,
        })

    def patch(self, request, pk):
        cycle = get_object_or_404(PayrollCycle, pk=pk)
        serializer = PayrollCycleUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            PayrollCycleService.update_cycle(
                cycle, request.user, status=data.get('status'),
                notes=data.get('notes'), request=request)
        except ValidationError as e:
            return Response({"detail": e.messages[0]}, status=400)
        return Response(PayrollCycleSerializer(cycle).data)

    def delete(self, request, pk):
        cycle = get_object_or_404(PayrollCycle, pk=pk)
        try:
            PayrollCycleService.delete_cycle(cycle, request.user, request=request)
        except ValidationError as e:
            return Response({"detail": e.messages[0]}, status=400)
        return Response(status=status.HTTP_204_NO_CONTENT)


class PayrollInputListAPIView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PayrollInputSerializer

    def get_queryset(self):
        qs = PayrollInput.objects.select_related(
            'employee', 'approved_by', 'processed_by')
        return _scoped(qs, self.request).order_by('-year', '-month')


class PayrollInputDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        payroll_input = get_object_or_404(
            PayrollInput.objects.select_related('employee'), pk=pk)
        if not _can_view(request.user, payroll_input):
            return Response(NOT_ALLOWED, status=403)
        return Response(PayrollInputSerializer(payroll_input).data)

    def patch(self, request, pk):
        if not is_manager_or_admin(request.user):
            return Response(NOT_ALLOWED, status=403)

        payroll_input = get_object_or_404(PayrollInput, pk=pk)
        serializer = PayrollInputUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            PayrollInputService.update(
                payroll_input, request.user, status=data.get('status'),
                notes=data.get('notes'), request=request)
        except ValidationError as e:
            return Response({"detail": e.messages[0]}, status=400)
        return Response(PayrollInputSerializer(payroll_input).data)


class VariablePayListCreateAPIView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = VariablePayEntrySerializer

    def get_queryset(self):
        qs = VariablePayEntry.objects.select_related(
            'employee', 'submitted_by', 'approved_by')
        return _scoped(qs, self.request).order_by('-created_at')

    def post(self, request):
        if not is_manager_or_admin(request.user):
            return Response(NOT_ALLOWED, status=403)

        serializer = VariablePayEntrySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        entry = serializer.save(submitted_by=request.user)

        logger.info("Variable pay submitted: id=%s employee=%s amount=%s",
                    entry.id, entry.employee.employee_id, entry.amount)
        return Response(VariablePayEntrySerializer(entry).data,
                        status=status.HTTP_201_CREATED)


class VariablePayDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        entry = get_object_or_404(
            VariablePayEntry.objects.select_related('employee'), pk=pk)
        if not _can_view(request.user, entry):
            return Response(NOT_ALLOWED, status=403)
        return Response(VariablePayEntrySerializer(entry).data)

    def put(self, request, pk):
        if not is_manager_or_admin(request.user):
            return Response(NOT_ALLOWED, status=403)

        entry = get_object_or_404(VariablePayEntry, pk=pk)
        serializer = VariablePayDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            VariablePayService.decide(
                entry, request.user, data['status'],
                rejection_reason=data.get('rejection_reason', ''), request=request)
        except ValidationError as e:
            return Response({"detail": e.messages[0], "current_status": entry.status},
                            status=400)
        return Response(VariablePayEntrySerializer(entry).data)


class PayslipListCreateAPIView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PayslipSerializer

    def get_queryset(self):
        qs = Payslip.objects.select_related('employee', 'payroll')
        return _scoped(qs, self.request).order_by('-year', '-month')

    def post(self, request):
        if not is_admin(request.user):
            return Response(NOT_ALLOWED, status=403)

        serializer = PayslipGenerateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        payrolls = Payroll.objects.select_related('employee')
        if data.get('payroll_id'):
            payrolls = payrolls.filter(id=data['payroll_id'])
        else:
            payrolls = payrolls.filter(month=data['month'], year=data['year'])

        if not payrolls.exists():
            return Response({"detail": "No payroll records found."}, status=404)

        created, skipped = PayslipService.generate(payrolls, request.user, request=request)
        logger.info("Payslips generated: created=%s skipped=%s by user=%s",
                    len(created), skipped, request.user.id)
        return Response({
            "generated": len(created),
            "skipped": skipped,
            "payslips": PayslipSerializer(created, many=True).data,
        }, status=status.HTTP_201_CREATED if created else status.HTTP_200_OK)


class PayslipDownloadAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        payslip = get_object_or_404(
            Payslip.objects.select_related(
                'employee', 'employee__department', 'payroll'), pk=pk)
        if not _can_view(request.user, payslip):
            return Response(NOT_ALLOWED, status=403)

        pdf = render_payslip(payslip)
        PayslipService.mark_downloaded(payslip, request.user, request=request)

        response = HttpResponse(pdf, content_type='application/pdf')
        response['Content-Disposition'] = f'attachment; filename="{payslip.file_name}"'
        return response


class CorrectionListCreateAPIView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CorrectionRequestSerializer

    def get_queryset(self):
        qs = PayrollCorrectionRequest.objects.select_related(
            'employee', 'payroll', 'reviewed_by')
        return _scoped(qs, self.request, filters=('status', 'type')).order_by('-created_at')

    def post(self, request):
        employee = get_employee_or_none(request.user)
        if employee is None:
            return Response({"detail": "Employee record not found."}, status=404)

        serializer = CorrectionRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payroll = serializer.validated_data['payroll']
        if payroll.employee_id != employee.id:
            return Response(
                {"detail": "You can only raise corrections for your own payroll."},
                status=403)

        correction = serializer.save(employee=employee, requested_by=request.user)
        audit("CORRECTION_REQUEST_CREATED", request.user, payroll=payroll,
              details={"correction_id": correction.id, "type": correction.type},
              request=request)
        return Response(CorrectionRequestSerializer(correction).data,
                        status=status.HTTP_201_CREATED)


class CorrectionDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        correction = get_object_or_404(
            PayrollCorrectionRequest.objects.select_related('employee', 'payroll'), pk=pk)
        if not _can_view(request.user, correction):
            return Response(NOT_ALLOWED, status=403)
        return Response(CorrectionRequestSerializer(correction).data)

    def put(self, request, pk):
        if not is_manager_or_admin(request.user):
            return Response(NOT_ALLOWED, status=403)

        correction = get_object_or_404(PayrollCorrectionRequest, pk=pk)
        serializer = CorrectionReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            CorrectionService.review(
                correction, request.user, serializer.validated_data, request=request)
        except ValidationError as e:
            return Response({"detail": e.messages[0], "current_status": correction.status},
                            status=400)
        return Response(CorrectionRequestSerializer(correction).data)


class PayrollDashboardAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = request.user
        today = timezone.localdate()
        numeric = parse_filters(request.query_params)
        month = numeric.get('month', today.month)
        year = numeric.get('year', today.year)

        pending_variable_pay = VariablePayEntry.objects.filter(
            status=VariablePayEntry.STATUS_PENDING)
        open_corrections = PayrollCorrectionRequest.objects.filter(
            status__in=PayrollCorrectionRequest.OPEN_STATUSES)

        if is_admin(user):
            payrolls = Payroll.objects.filter(month=month, year=year)
            totals = payrolls.aggregate(
                basic=Sum('basic_salary'),
                allowances=Sum('allowances'),
                deductions=Sum('deductions'),
                net=Sum('net_salary'),
            )
            return Response({
                "role": "admin",
                "month": month,
                "year": year,
                "status_counts": {
                    row['status']: row['count']
                    for row in payrolls.values('status').annotate(count=Count('id'))
                },
                "totals": {k: v or 0 for k, v in totals.items()},
                "pending_variable_pay": pending_variable_pay.count(),
                "open_corrections": open_corrections.count(),
                "recent_activity": PayrollAuditLogSerializer(
                    PayrollAuditLog.objects.select_related('performed_by')[:10],
                    many=True).data,
            })

        if is_manager_or_admin(user):
            return Response({
                "role": "manager",
                "month": month,
                "year": year,
                "pending_variable_pay": pending_variable_pay.count(),
                "open_corrections": open_corrections.count(),
                "pending_variable_pay_entries": VariablePayEntrySerializer(
                    pending_variable_pay.select_related('employee')[:10],
                    many=True).data,
            })

        employee = get_employee_or_none(user)
        if employee is None:
            return Response({"detail": "Employee record not found."}, status=404)

        latest = Payroll.objects.filter(employee=employee).order_by('-year', '-month').first()
        ytd = Payroll.objects.filter(
            employee=employee, year=year,
            status__in=[Payroll.STATUS_PROCESSED, Payroll.STATUS_PAID],
        ).aggregate(total=Sum('net_salary'))['total'] or 0

        return Response({
            "role": "employee",
            "latest_payroll": PayrollSerializer(latest).data if latest else None,
            "year_to_date_net": ytd,
            "open_corrections": CorrectionRequestSerializer(
                open_corrections.filter(employee=employee), many=True).data,
        })


class PayrollExportAPIView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    def get(self, request):
        serializer = ExportQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        content, rows = build_export(
            data['format'], data['month'], data['year'],
            department=data.get('department'), status=data.get('status') or None)

        audit("PAYROLL_EXPORT", request.user,
              details={"format": data['format'], "month": data['month'],
                       "year": data['year'], "rows": rows},
              request=request)
        logger.info("Payroll export %s %s-%02d rows=%s by user=%s",
                    data['format'], data['year'], data['month'], rows, request.user.id)

        response = HttpResponse(content, content_type='text/csv')
        response['Content-Disposition'] = (
            f'attachment; filename="{export_filename(data["format"], data["month"], data["year"])}"')
        return response
