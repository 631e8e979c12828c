import logging

from django.core.exceptions import ValidationError
from django.shortcuts import get_object_or_404
from rest_framework import generics, status
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import is_manager_or_admin
from employees.query import parse_filters
from employees.utils import get_employee_or_none
from .models import Attendance, AttendanceRegularizationRequest
from .serializers import (
    AttendanceActionSerializer,
    AttendanceCorrectionSerializer,
    AttendanceSerializer,
    RegularizationReviewSerializer,
    RegularizationSerializer,
)
from .services import AttendanceCorrectionService, AttendanceService, RegularizationService

logger = logging.getLogger(__name__)

NO_EMPLOYEE_RECORD = {"detail": "Employee record not found."}


class AttendanceListCreateAPIView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = AttendanceSerializer

    def get_queryset(self):
        user = self.request.user
        params = self.request.query_params
        qs = Attendance.objects.select_related('employee')

        numeric = parse_filters(params)
        employee_param = numeric.get('employee')
        if is_manager_or_admin(user):
            if employee_param:
                qs = qs.filter(employee_id=employee_param)
        else:
            own = get_employee_or_none(user)
            if own is None:
                return qs.none()
            if employee_param and employee_param != own.id:
                raise PermissionDenied(
                    "You can only view your own attendance.")
            qs = qs.filter(employee=own)

        month = numeric.get('month')
        year = numeric.get('year')
        if year:
            qs = qs.filter(date__year=year)
        if month:
            qs = qs.filter(date__month=month)

        return qs.order_by('-date')

    def post(self, request):
        employee = get_employee_or_none(request.user)
        if employee is None:
            return Response(NO_EMPLOYEE_RECORD, status=404)

        serializer = AttendanceActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            if data['action'] == 'checkin':
                att = AttendanceService.check_in(
                    employee, data.get('location', ''), data.get('notes', ''))
                code = status.HTTP_201_CREATED
            else:
                att = AttendanceService.check_out(
                    employee, data.get('location', ''), data.get('notes', ''))
                code = status.HTTP_200_OK
        except ValidationError as e:
            return Response({"detail": e.messages[0]}, status=400)

        logger.info("Attendance %s: employee=%s date=%s",
                    data['action'], employee.employee_id, att.date)
        return Response(AttendanceSerializer(att).data, status=code)


class AttendanceDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        att = get_object_or_404(
            Attendance.objects.select_related('employee'), pk=pk)
        if not is_manager_or_admin(request.user) and att.employee.user_id != request.user.id:
            return Response({"detail": "Not allowed"}, status=403)
        return Response(AttendanceSerializer(att).data)

    def patch(self, request, pk):
        if not is_manager_or_admin(request.user):
            return Response({"detail": "Not allowed"}, status=403)

        att = get_object_or_404(Attendance, pk=pk)
        serializer = AttendanceCorrectionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            att = AttendanceCorrectionService.correct_attendance(
                att, serializer.validated_data, request.user)
        except ValidationError as e:
            return Response({"detail": e.messages[0]}, status=400)

        return Response(AttendanceSerializer(att).data)


class RegularizationListCreateAPIView(generics.ListCreateAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = RegularizationSerializer

    def get_queryset(self):
        user = self.request.user
        qs = AttendanceRegularizationRequest.objects.select_related(
            'employee', 'reviewed_by')

        if not is_manager_or_admin(user):
            own = get_employee_or_none(user)
            if own is None:
                return qs.none()
            qs = qs.filter(employee=own)

        status_param = self.request.query_params.get('status')
        if status_param:
            qs = qs.filter(status=status_param)
        return qs.order_by('-created_at')

    def create(self, request, *args, **kwargs):
        employee = get_employee_or_none(request.user)
        if employee is None:
            return Response(NO_EMPLOYEE_RECORD, status=404)

        serializer = RegularizationSerializer(
            data=request.data, context={'request': request, 'employee': employee})
        serializer.is_valid(raise_exception=True)
        obj = serializer.save()
        return Response(RegularizationSerializer(obj).data, status=201)


class RegularizationDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        obj = get_object_or_404(
            AttendanceRegularizationRequest.objects.select_related('employee'), pk=pk)
        if not is_manager_or_admin(request.user) and obj.employee.user_id != request.user.id:
            return Response({"detail": "Not allowed"}, status=403)
        return Response(RegularizationSerializer(obj).data)

    def put(self, request, pk):
        if not is_manager_or_admin(request.user):
            return Response({"detail": "Not allowed"}, status=403)

        obj = get_object_or_404(AttendanceRegularizationRequest, pk=pk)
        serializer = RegularizationReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            obj = RegularizationService.review(
                obj,
                request.user,
                serializer.validated_data['status'],
                serializer.validated_data.get('review_comments', ''),
            )
        except ValidationError as e:
            return Response({"detail": e.messages[0]}, status=400)

        logger.info("Regularization %s %s by user=%s",
                    obj.id, obj.status, request.user.id)
        return Response(RegularizationSerializer(obj).data)
