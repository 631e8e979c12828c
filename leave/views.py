import logging

from django.db import transaction
from django.shortcuts import get_object_or_404
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import is_admin, is_manager_or_admin
from employees.models import Employee
from employees.query import parse_filters
from employees.utils import get_employee_or_none
from .models import LeaveRequest
from .serializers import LeaveActionSerializer, LeaveApplySerializer, LeaveRequestSerializer

logger = logging.getLogger(__name__)


class LeaveListCreateAPIView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = LeaveRequestSerializer

    def get_queryset(self):
        user = self.request.user
        params = self.request.query_params
        qs = LeaveRequest.objects.select_related('employee', 'approved_by')

        numeric = parse_filters(params)
        if is_manager_or_admin(user):
            if numeric.get('employee'):
                qs = qs.filter(employee_id=numeric['employee'])
        else:
            own = get_employee_or_none(user)
            if own is None:
                return qs.none()
            qs = qs.filter(employee=own)

        status_param = params.get('status')
        if status_param:
            qs = qs.filter(status=status_param)
        leave_type = params.get('leave_type')
        if leave_type:
            qs = qs.filter(leave_type=leave_type)

        return qs.order_by('-created_at')

    def post(self, request):
        serializer = LeaveApplySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        employee = data.get('employee')
        if employee is None or not is_manager_or_admin(request.user):
            employee = get_employee_or_none(request.user)
            if employee is None:
                return Response({"detail": "Employee record not found."}, status=404)

        start, end = data['start_date'], data['end_date']
        with transaction.atomic():
            # Serialises concurrent requests for the same employee.
            Employee.objects.select_for_update().get(pk=employee.pk)
            overlapping = LeaveRequest.objects.filter(
                employee=employee,
                status__in=[LeaveRequest.STATUS_PENDING, LeaveRequest.STATUS_APPROVED],
                start_date__lte=end,
                end_date__gte=start,
            )
            if overlapping.exists():
                return Response(
                    {"detail": "A leave request already overlaps the selected date(s)."},
                    status=status.HTTP_400_BAD_REQUEST
                )

            lr = LeaveRequest.objects.create(
                employee=employee,
                leave_type=data['leave_type'],
                start_date=start,
                end_date=end,
                reason=data['reason'],
            )
        logger.info("Leave requested: id=%s employee=%s %s..%s",
                    lr.id, employee.employee_id, start, end)
        return Response(LeaveRequestSerializer(lr).data, status=201)


class LeaveDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        lr = get_object_or_404(
            LeaveRequest.objects.select_related('employee'), pk=pk)
        if not is_manager_or_admin(request.user) and lr.employee.user_id != request.user.id:
            return Response({"detail": "Not allowed"}, status=403)
        return Response(LeaveRequestSerializer(lr).data)

    def put(self, request, pk):
        lr = get_object_or_404(
            LeaveRequest.objects.select_related('employee'), pk=pk)
        user = request.user
        is_owner = lr.employee.user_id == user.id

        serializer = LeaveActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        new_status = serializer.validated_data['status']
        comments = serializer.validated_data.get('comments', '')

        if new_status == LeaveRequest.STATUS_CANCELLED:
            if not is_owner:
                return Response(
                    {"detail": "Only the requester can cancel a leave request."},
                    status=403
                )
            if lr.status not in (LeaveRequest.STATUS_PENDING, LeaveRequest.STATUS_APPROVED):
                return Response(
                    {"detail": f"Cannot cancel a {lr.status.lower()} leave request.",
                     "current_status": lr.status},
                    status=400
                )
            lr.cancel(comments)
            return Response(LeaveRequestSerializer(lr).data)

        if not is_manager_or_admin(user):
            return Response({"detail": "Not allowed"}, status=403)

        if is_owner and not is_admin(user):
            return Response(
                {"detail": "Managers cannot approve or reject their own leave."},
                status=403
            )

        if lr.status != LeaveRequest.STATUS_PENDING:
            return Response(
                {"detail": "Only pending leave requests can be approved or rejected.",
                 "current_status": lr.status},
                status=400
            )

        lr.apply_decision(
            user, approve=new_status == LeaveRequest.STATUS_APPROVED, comments=comments)
        logger.info("Leave %s %s by user=%s", lr.id, lr.status, user.id)
        return Response(LeaveRequestSerializer(lr).data)

    def delete(self, request, pk):
        lr = get_object_or_404(
            LeaveRequest.objects.select_related('employee'), pk=pk)
        if lr.employee.user_id != request.user.id and not is_admin(request.user):
            return Response({"detail": "Not allowed"}, status=403)

        if lr.status != LeaveRequest.STATUS_PENDING:
            return Response(
                {"detail": "Only pending leave requests can be deleted."},
                status=400
            )

        lr.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
