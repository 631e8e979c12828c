# performance/views.py
import logging

from django.db.models import Count
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import is_admin, is_manager_or_admin
from employees.query import parse_filters
from employees.utils import get_employee_or_none
from .models import GoalUpdate, PerformanceGoal, PerformanceReview, ReviewCycle
from .serializers import (
    GoalUpdateSerializer,
    PerformanceGoalSerializer,
    PerformanceReviewSerializer,
    ReviewCycleSerializer,
)

logger = logging.getLogger(__name__)

NOT_ALLOWED = {"detail": "Not allowed"}


def _is_owner(user, obj):
    return obj.employee.user_id == user.id


class ReviewCycleListCreateAPIView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ReviewCycleSerializer

    def get_queryset(self):
        qs = ReviewCycle.objects.annotate(review_count=Count('reviews'))
        status_param = self.request.query_params.get('status')
        if status_param:
            qs = qs.filter(status=status_param)
        return qs.order_by('-start_date')

    def post(self, request):
        if not is_admin(request.user):
            return Response(NOT_ALLOWED, status=403)
        serializer = ReviewCycleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        cycle = serializer.save(created_by=request.user)
        logger.info("Review cycle created: id=%s by user=%s", cycle.id, request.user.id)
        return Response(ReviewCycleSerializer(cycle).data, status=status.HTTP_201_CREATED)


class ReviewCycleDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        cycle = get_object_or_404(
            ReviewCycle.objects.annotate(review_count=Count('reviews')), pk=pk)
        return Response(ReviewCycleSerializer(cycle).data)

    def patch(self, request, pk):
        if not is_admin(request.user):
            return Response(NOT_ALLOWED, status=403)
        cycle = get_object_or_404(ReviewCycle, pk=pk)
        serializer = ReviewCycleSerializer(cycle, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    def delete(self, request, pk):
        if not is_admin(request.user):
            return Response(NOT_ALLOWED, status=403)
        cycle = get_object_or_404(ReviewCycle, pk=pk)
        if cycle.reviews.exists():
            return Response(
                {"detail": "Cannot delete a review cycle that has reviews."},
                status=400)
        cycle.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


class GoalListCreateAPIView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PerformanceGoalSerializer

    def get_queryset(self):
        user = self.request.user
        params = self.request.query_params
        qs = PerformanceGoal.objects.select_related('employee').prefetch_related('updates')

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
        return qs.order_by('-created_at')

    def post(self, request):
        serializer = PerformanceGoalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        employee = serializer.validated_data.get('employee')
        if employee is None or not is_manager_or_admin(request.user):
            employee = get_employee_or_none(request.user)
            if employee is None:
                return Response({"detail": "Employee record not found."}, status=404)

        goal = serializer.save(employee=employee)
        if goal.status == PerformanceGoal.STATUS_COMPLETED:
            goal.mark_completed()
            goal.save()
        return Response(PerformanceGoalSerializer(goal).data, status=status.HTTP_201_CREATED)


class GoalDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def _get(self, request, pk):
        goal = get_object_or_404(
            PerformanceGoal.objects.select_related('employee'), pk=pk)
        if not (is_manager_or_admin(request.user) or _is_owner(request.user, goal)):
            return None
        return goal

    def get(self, request, pk):
        goal = self._get(request, pk)
        if goal is None:
            return Response(NOT_ALLOWED, status=403)
        return Response(PerformanceGoalSerializer(goal).data)

    def patch(self, request, pk):
        goal = self._get(request, pk)
        if goal is None:
            return Response(NOT_ALLOWED, status=403)

        data = request.data.copy()
        if not is_manager_or_admin(request.user):
            # owners cannot move goals to someone else
            data.pop('employee', None)

        serializer = PerformanceGoalSerializer(goal, data=data, partial=True)
        serializer.is_valid(raise_exception=True)
        goal = serializer.save()
        if serializer.validated_data.get('status') == PerformanceGoal.STATUS_COMPLETED:
            goal.mark_completed()
            goal.save()
        return Response(PerformanceGoalSerializer(goal).data)

    def delete(self, request, pk):
        goal = self._get(request, pk)
        if goal is None:
            return Response(NOT_ALLOWED, status=403)
        goal.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


class GoalUpdateCreateAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, pk):
        goal = get_object_or_404(
            PerformanceGoal.objects.select_related('employee'), pk=pk)
        if not (is_manager_or_admin(request.user) or _is_owner(request.user, goal)):
            return Response(NOT_ALLOWED, status=403)

        serializer = GoalUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        update = serializer.save(goal=goal, updated_by=request.user)

        goal.progress = update.progress
        if update.progress == 100 and goal.status == PerformanceGoal.STATUS_ACTIVE:
            goal.mark_completed()
        goal.save()

        return Response({
            **GoalUpdateSerializer(update).data,
            "goal_progress": goal.progress,
            "goal_status": goal.status,
        }, status=status.HTTP_201_CREATED)


class ReviewListCreateAPIView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = PerformanceReviewSerializer

    def get_queryset(self):
        user = self.request.user
        params = self.request.query_params
        qs = PerformanceReview.objects.select_related(
            'employee', 'cycle', 'goal', 'reviewed_by')

        numeric = parse_filters(params)
        if is_manager_or_admin(user):
            if numeric.get('employee'):
                qs = qs.filter(employee_id=numeric['employee'])
        else:
            own = get_employee_or_none(user)
            if own is None:
                return qs.none()
            qs = qs.filter(employee=own)

        for name in ('status', 'cycle'):
            value = numeric.get(name, params.get(name))
            if value:
                qs = qs.filter(**{name: value})
        return qs.order_by('-created_at')

    def post(self, request):
        if not is_manager_or_admin(request.user):
            return Response(NOT_ALLOWED, status=403)

        serializer = PerformanceReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        review = serializer.save(reviewed_by=request.user)
        logger.info("Performance review created: id=%s employee=%s by user=%s",
                    review.id, review.employee.employee_id, request.user.id)
        return Response(PerformanceReviewSerializer(review).data,
                        status=status.HTTP_201_CREATED)


class ReviewDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        review = get_object_or_404(
            PerformanceReview.objects.select_related('employee', 'cycle'), pk=pk)
        user = request.user
        if not (is_admin(user) or review.reviewed_by_id == user.id
                or _is_owner(user, review)):
            return Response(NOT_ALLOWED, status=403)
        return Response(PerformanceReviewSerializer(review).data)

    def patch(self, request, pk):
        review = get_object_or_404(PerformanceReview, pk=pk)
        user = request.user
        if not (is_admin(user) or review.reviewed_by_id == user.id):
            return Response(NOT_ALLOWED, status=403)

        serializer = PerformanceReviewSerializer(review, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        review = serializer.save()
        if (serializer.validated_data.get('status') == PerformanceReview.STATUS_COMPLETED
                and not review.reviewed_at):
            review.reviewed_at = timezone.now()
            review.save(update_fields=['reviewed_at'])
        return Response(PerformanceReviewSerializer(review).data)

    def delete(self, request, pk):
        if not is_admin(request.user):
            return Response(NOT_ALLOWED, status=403)
        review = get_object_or_404(PerformanceReview, pk=pk)
        review.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
