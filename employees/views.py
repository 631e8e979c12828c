# employees/views.py
from datetime import date
import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Count, Q, Sum
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdmin, IsManagerOrAdmin, is_admin, is_manager_or_admin
from attendance.models import Attendance
from leave.models import LeaveRequest
from onboarding.models import OnboardingSubmission
from payroll.models import Payroll
from .constants import ADMIN_FIELDS, CONTACT_FIELDS, MANAGER_FIELDS
from .models import Department, Employee
from .query import parse_filters
from .serializers import (
    DepartmentSerializer,
    EmployeeAdminUpdateSerializer,
    EmployeeContactUpdateSerializer,
    EmployeeCreateSerializer,
    EmployeeManagerUpdateSerializer,
    EmployeeReadSerializer,
)

logger = logging.getLogger(__name__)
User = get_user_model()


class DepartmentListCreateAPIView(generics.ListCreateAPIView):
    serializer_class = DepartmentSerializer
    pagination_class = None

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAuthenticated(), IsAdmin()]
        return [IsAuthenticated()]

    def get_queryset(self):
        return Department.objects.filter(is_active=True).annotate(
            employee_count=Count(
                'employees', filter=Q(employees__is_active=True))
        ).order_by('name')


class EmployeeListCreateAPIView(generics.ListCreateAPIView):

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAuthenticated(), IsAdmin()]
        return [IsAuthenticated(), IsManagerOrAdmin()]

    def get_serializer_class(self):
        if self.request.method == "POST":
            return EmployeeCreateSerializer
        return EmployeeReadSerializer

    def get_queryset(self):
        qs = Employee.objects.select_related('user', 'department')
        params = self.request.query_params

        search = (params.get('search') or '').strip()
        if search:
            qs = qs.filter(
                Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
                | Q(employee_id__icontains=search)
                | Q(user__email__icontains=search)
            )

        department = parse_filters(params).get('department')
        if department:
            qs = qs.filter(department_id=department)

        is_active = params.get('is_active')
        if is_active in ('true', '1', 'True'):
            qs = qs.filter(is_active=True)
        elif is_active in ('false', '0', 'False'):
            qs = qs.filter(is_active=False)

        return qs.order_by('-created_at')

    def create(self, request, *args, **kwargs):
        serializer = EmployeeCreateSerializer(
            data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        employee = serializer.save()
        logger.info("Employee created: %s by user=%s",
                    employee.employee_id, request.user.id)
        return Response(EmployeeReadSerializer(employee).data,
                        status=status.HTTP_201_CREATED)


class EmployeeDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def _can_view(self, user, employee):
        return is_manager_or_admin(user) or employee.user_id == user.id

    def get(self, request, pk):
        employee = get_object_or_404(
            Employee.objects.select_related('user', 'department'), pk=pk)
        if not self._can_view(request.user, employee):
            return Response({"detail": "Not allowed"}, status=403)
        return Response(EmployeeReadSerializer(employee).data)

    def patch(self, request, pk):
        employee = get_object_or_404(Employee, pk=pk)
        user = request.user

        if is_admin(user):
            serializer_class, allowed = EmployeeAdminUpdateSerializer, ADMIN_FIELDS
        elif is_manager_or_admin(user):
            serializer_class, allowed = EmployeeManagerUpdateSerializer, MANAGER_FIELDS
        elif employee.user_id == user.id:
            serializer_class, allowed = EmployeeContactUpdateSerializer, CONTACT_FIELDS
        else:
            return Response({"detail": "Not allowed"}, status=403)

        forbidden = sorted(set(request.data.keys()) - set(allowed))
        if forbidden:
            return Response(
                {"detail": f"You cannot modify: {', '.join(forbidden)}"},
                status=403
            )

        serializer = serializer_class(employee, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()

        if 'is_active' in serializer.validated_data:
            employee.user.is_active = employee.is_active
            employee.user.save(update_fields=['is_active'])

        return Response(EmployeeReadSerializer(employee).data)

    def delete(self, request, pk):
        if not is_admin(request.user):
            return Response({"detail": "Not allowed"}, status=403)

        employee = get_object_or_404(Employee, pk=pk)
        with transaction.atomic():
            employee.is_active = False
            employee.save(update_fields=['is_active', 'updated_at'])
            employee.user.is_active = False
            employee.user.save(update_fields=['is_active'])

        logger.info("Employee deactivated: %s by user=%s",
                    employee.employee_id, request.user.id)
        return Response({"detail": "Employee deactivated"})


def _days_until_birthday(dob, today):
    def _on_year(year):
        try:
            return dob.replace(year=year)
        except ValueError:
            # 29 Feb outside leap years
            return date(year, 3, 1)

    upcoming = _on_year(today.year)
    if upcoming < today:
        upcoming = _on_year(today.year + 1)
    return (upcoming - today).days


class DashboardStatsAPIView(APIView):
    permission_classes = [IsAuthenticated, IsManagerOrAdmin]

    def get(self, request):
        today = timezone.localdate()

        employees = Employee.objects.all()
        active_employees = employees.filter(is_active=True)

        month_attendance = Attendance.objects.filter(
            date__year=today.year, date__month=today.month)
        attendance_by_status = {
            row['status']: row['count']
            for row in month_attendance.values('status').annotate(count=Count('id'))
        }
        total_records = sum(attendance_by_status.values())
        present_records = (attendance_by_status.get(Attendance.STATUS_PRESENT, 0)
                           + attendance_by_status.get(Attendance.STATUS_LATE, 0))
        attendance_rate = round(
            present_records * 100 / total_records) if total_records else 0

        monthly_payroll = Payroll.objects.filter(
            month=today.month, year=today.year, status=Payroll.STATUS_PAID
        ).aggregate(total=Sum('net_salary'))['total'] or 0

        onboarding = {
            row['status']: row['count']
            for row in OnboardingSubmission.objects.values('status').annotate(count=Count('id'))
        }

        birthdays = []
        for emp in active_employees.exclude(date_of_birth__isnull=True):
            days = _days_until_birthday(emp.date_of_birth, today)
            if days <= 7:
                birthdays.append({
                    "id": emp.id,
                    "name": emp.full_name(),
                    "date_of_birth": emp.date_of_birth,
                    "days_until": days,
                })
        birthdays.sort(key=lambda b: b["days_until"])

        recent_leaves = LeaveRequest.objects.filter(
            status=LeaveRequest.STATUS_PENDING
        ).select_related('employee').order_by('-created_at')[:5]

        departments = Department.objects.filter(is_active=True).annotate(
            employee_count=Count('employees', filter=Q(employees__is_active=True))
        ).order_by('name')

        return Response({
            "total_employees": employees.count(),
            "active_employees": active_employees.count(),
            "total_departments": departments.count(),
            "pending_leaves": LeaveRequest.objects.filter(
                status=LeaveRequest.STATUS_PENDING).count(),
            "present_today": Attendance.objects.filter(
                date=today,
                status__in=[Attendance.STATUS_PRESENT, Attendance.STATUS_LATE]
            ).count(),
            "monthly_payroll": monthly_payroll,
            "attendance_rate": attendance_rate,
            "onboarding": onboarding,
            "upcoming_birthdays": birthdays[:5],
            "recent_leave_requests": [
                {
                    "id": lr.id,
                    "employee": lr.employee.full_name(),
                    "leave_type": lr.leave_type,
                    "start_date": lr.start_date,
                    "end_date": lr.end_date,
                }
                for lr in recent_leaves
            ],
            "monthly_attendance": attendance_by_status,
            "departments": [
                {"id": d.id, "name": d.name, "employee_count": d.employee_count}
                for d in departments
            ],
        })
