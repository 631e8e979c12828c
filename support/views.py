import logging

from django.db.models import Count, Q
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import generics
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsManagerOrAdmin, is_admin, is_manager_or_admin
from employees.utils import get_employee_or_none
from . import workflow
from .models import EmployeeRequest
from .serializers import (
    EmployeeRequestCreateSerializer,
    EmployeeRequestDetailSerializer,
    EmployeeRequestSerializer,
    EmployeeRequestUpdateSerializer,
    RequestCommentCreateSerializer,
    RequestCommentSerializer,
)

logger = logging.getLogger(__name__)

NOT_FOUND = {"detail": "Request not found"}


def _requests():
    return EmployeeRequest.objects.select_related(
        'employee', 'assigned_to'
    ).annotate(comment_count=Count('comments'))


class EmployeeRequestListCreateAPIView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = EmployeeRequestSerializer

    def get_queryset(self):
        employee = get_employee_or_none(self.request.user)
        if employee is None:
            return EmployeeRequest.objects.none()
        return _requests().filter(employee=employee).order_by('-created_at')

    def post(self, request):
        employee = get_employee_or_none(request.user)
        if employee is None:
            return Response({"detail": "Employee record not found."}, status=404)

        serializer = EmployeeRequestCreateSerializer(
            data=request.data,
            context={'employee': employee}
        )
        serializer.is_valid(raise_exception=True)
        employee_request = serializer.save()

        logger.info("Employee request created: id=%s employee=%s category=%s",
                    employee_request.id, employee.employee_id, employee_request.category)
        return Response(
            EmployeeRequestSerializer(employee_request).data,
            status=201
        )


class EmployeeRequestStatsAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        employee = get_employee_or_none(request.user)
        if employee is None:
            return Response({"detail": "Employee record not found."}, status=404)

        counts = {
            row['status']: row['count']
            for row in EmployeeRequest.objects.filter(employee=employee)
            .values('status').annotate(count=Count('id'))
        }
        return Response({
            "total": sum(counts.values()),
            "open": counts.get(workflow.OPEN, 0),
            "in_progress": counts.get(workflow.IN_PROGRESS, 0),
            "waiting_info": counts.get(workflow.WAITING_INFO, 0),
            "resolved": counts.get(workflow.RESOLVED, 0),
            "closed": counts.get(workflow.CLOSED, 0),
        })


class EmployeeRequestDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        qs = _requests().prefetch_related('comments__author')
        if not is_manager_or_admin(request.user):
            # other people's requests are reported as missing, not forbidden
            employee = get_employee_or_none(request.user)
            if employee is None:
                return Response(NOT_FOUND, status=404)
            qs = qs.filter(employee=employee)

        employee_request = qs.filter(pk=pk).first()
        if employee_request is None:
            return Response(NOT_FOUND, status=404)

        return Response(EmployeeRequestDetailSerializer(
            employee_request, context={'request': request}).data)

    def put(self, request, pk):
        employee_request = get_object_or_404(
            EmployeeRequest.objects.select_related('employee'), pk=pk)
        user = request.user

        serializer = EmployeeRequestUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if is_manager_or_admin(user):
            changes = self._staff_changes(employee_request, user, data)
        else:
            changes = self._owner_changes(employee_request, user, data)

        if isinstance(changes, Response):
            return changes
        if not changes:
            return Response({"detail": "No valid fields to update"})

        for field, value in changes.items():
            setattr(employee_request, field, value)
        employee_request.save()

        logger.info("Employee request %s updated by user=%s: %s",
                    employee_request.id, user.id, ", ".join(sorted(changes)))
        return Response(EmployeeRequestSerializer(
            _requests().get(pk=employee_request.pk)).data)

    def _owner_changes(self, employee_request, user, data):
        if employee_request.owner_id != user.id:
            return Response(
                {"detail": "You can only update your own requests."}, status=403)

        changes = {}
        new_status = data.get('status')
        if new_status is not None and new_status != employee_request.status:
            if not workflow.is_valid_transition(
                    employee_request.status, new_status, workflow.EMPLOYEE):
                return Response(
                    {"detail": "Employees can only close resolved requests "
                               "or update title/description."},
                    status=403)
            changes['status'] = new_status

        editing = 'title' in data or 'description' in data
        if editing and employee_request.status not in workflow.OWNER_EDITABLE:
            return Response(
                {"detail": "Cannot edit resolved or closed requests."}, status=400)

        for field in ('title', 'description'):
            if field in data:
                changes[field] = data[field]
        return changes

    def _staff_changes(self, employee_request, user, data):
        changes = {}
        for field in ('title', 'description'):
            if field in data:
                changes[field] = data[field]

        new_status = data.get('status')
        if new_status is not None and new_status != employee_request.status:
            if not workflow.is_valid_transition(
                    employee_request.status, new_status, user.role):
                return Response(
                    {"detail": f"Invalid status transition from "
                               f"{employee_request.status} to {new_status}.",
                     "valid_next_statuses": workflow.valid_next_statuses(
                         employee_request.status, user.role)},
                    status=400)
            changes['status'] = new_status

        if 'assigned_to' in data:
            assignee = data['assigned_to']
            changes['assigned_to'] = assignee
            if (assignee is not None and 'status' not in changes
                    and employee_request.status == workflow.OPEN):
                changes['status'] = workflow.IN_PROGRESS
        return changes

    def delete(self, request, pk):
        employee_request = get_object_or_404(
            EmployeeRequest.objects.select_related('employee'), pk=pk)
        user = request.user

        if not is_admin(user):
            if is_manager_or_admin(user):
                return Response({"detail": "Not allowed"}, status=403)
            if employee_request.owner_id != user.id:
                return Response(
                    {"detail": "You can only delete your own requests."}, status=403)
            if employee_request.status != workflow.OPEN:
                return Response(
                    {"detail": "Can only delete open requests."}, status=400)

        employee_request.delete()
        logger.info("Employee request %s deleted by user=%s", pk, user.id)
        return Response({"detail": "Request deleted successfully"})


class RequestCommentListCreateAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def _get_request(self, request, pk):
        employee_request = get_object_or_404(
            EmployeeRequest.objects.select_related('employee'), pk=pk)
        allowed = workflow.can_perform_action(
            request.user.role, "comment", employee_request, request.user.id)
        return employee_request, allowed

    def get(self, request, pk):
        employee_request, allowed = self._get_request(request, pk)
        if not allowed:
            return Response({"detail": "Not allowed"}, status=403)
        comments = employee_request.comments.select_related('author')
        return Response(RequestCommentSerializer(comments, many=True).data)

    def post(self, request, pk):
        employee_request, allowed = self._get_request(request, pk)
        if not allowed:
            return Response({"detail": "Not allowed"}, status=403)

        if employee_request.status == workflow.CLOSED:
            return Response(
                {"detail": "Cannot comment on closed requests."},
                status=400
            )

        serializer = RequestCommentCreateSerializer(
            data=request.data,
            context={
                'request': request,
                'employee_request': employee_request
            }
        )
        serializer.is_valid(raise_exception=True)
        comment = serializer.save()

        EmployeeRequest.objects.filter(pk=employee_request.pk).update(
            updated_at=timezone.now())

        return Response(RequestCommentSerializer(comment).data, status=201)


class RequestQueueAPIView(generics.ListAPIView):
    permission_classes = [IsAuthenticated, IsManagerOrAdmin]
    serializer_class = EmployeeRequestSerializer

    def get_queryset(self):
        params = self.request.query_params
        qs = _requests()

        for name in ('status', 'category'):
            value = params.get(name)
            if value:
                qs = qs.filter(**{name: value})

        assigned = params.get('assigned_to')
        if assigned == 'me':
            qs = qs.filter(assigned_to=self.request.user)
        elif assigned == 'unassigned':
            qs = qs.filter(assigned_to__isnull=True)
        elif assigned and assigned.isdigit():
            qs = qs.filter(assigned_to_id=int(assigned))

        search = (params.get('search') or '').strip()
        if search:
            qs = qs.filter(
                Q(title__icontains=search)
                | Q(description__icontains=search)
                | Q(employee__first_name__icontains=search)
                | Q(employee__last_name__icontains=search)
            )

        return qs.order_by('-created_at')
