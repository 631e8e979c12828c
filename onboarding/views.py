# onboarding/views.py
import logging

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.shortcuts import get_object_or_404
from rest_framework import generics, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import AccessToken

from accounts.authentication import ONBOARDING_CLAIM, OnboardingJWTAuthentication
from accounts.permissions import IsAdmin, IsManagerOrAdmin, is_manager_or_admin
from .models import OnboardingStep, OnboardingSubmission
from .serializers import (
    OnboardingCreateSerializer,
    OnboardingLoginSerializer,
    OnboardingStepSerializer,
    OnboardingSubmissionSerializer,
    StepReviewSerializer,
    StepSubmitSerializer,
)
from .services import OnboardingService

logger = logging.getLogger(__name__)
User = get_user_model()


class OnboardingCreateAPIView(APIView):
    permission_classes = [IsAuthenticated, IsManagerOrAdmin]

    def post(self, request):
        serializer = OnboardingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        submission = OnboardingService.create(serializer.validated_data, request.user)
        return Response(OnboardingSubmissionSerializer(submission).data,
                        status=status.HTTP_201_CREATED)


class OnboardingLoginView(APIView):
    """
    Issues an access token to a new hire whose account stays inactive
    until onboarding completes. Only onboarding views accept it.
    """
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [AnonRateThrottle]

    def post(self, request):
        serializer = OnboardingLoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        user = User.objects.filter(username=data['username']).first()
        if user is None or not user.check_password(data['password']):
            return Response({"detail": "Invalid credentials"}, status=401)

        submission = OnboardingSubmission.objects.filter(user=user).first()
        if submission is None or submission.status not in (
                OnboardingSubmission.STATUS_CREATED,
                OnboardingSubmission.STATUS_IN_PROGRESS):
            return Response({"detail": "No onboarding in progress for this account."},
                            status=403)

        token = AccessToken.for_user(user)
        token[ONBOARDING_CLAIM] = True
        token["role"] = user.role
        token["username"] = user.username

        logger.info("Onboarding login: user=%s submission=%s", user.id, submission.id)
        return Response({
            "access": str(token),
            "submission_id": submission.id,
            "redirect_url": "/onboarding",
        })


class SubmissionListAPIView(generics.ListAPIView):
    permission_classes = [IsAuthenticated, IsManagerOrAdmin]
    serializer_class = OnboardingSubmissionSerializer

    def get_queryset(self):
        qs = OnboardingSubmission.objects.select_related(
            'user', 'department', 'employee').prefetch_related('steps')
        status_param = self.request.query_params.get('status')
        if status_param:
            qs = qs.filter(status=status_param)
        return qs.order_by('-created_at')


class SubmissionDetailAPIView(generics.RetrieveAPIView):
    permission_classes = [IsAuthenticated, IsManagerOrAdmin]
    serializer_class = OnboardingSubmissionSerializer
    queryset = OnboardingSubmission.objects.select_related(
        'user', 'department', 'employee').prefetch_related('steps')


class SubmissionCancelAPIView(APIView):
    permission_classes = [IsAuthenticated, IsManagerOrAdmin]

    def post(self, request, pk):
        submission = get_object_or_404(OnboardingSubmission, pk=pk)
        try:
            OnboardingService.cancel(submission, request.user)
        except ValidationError as e:
            return Response({"detail": e.messages[0], "current_status": submission.status},
                            status=400)
        return Response(OnboardingSubmissionSerializer(submission).data)


class MyOnboardingStatusAPIView(APIView):
    authentication_classes = [OnboardingJWTAuthentication]
    permission_classes = [IsAuthenticated]

    def get(self, request):
        submission = OnboardingSubmission.objects.select_related(
            'department', 'employee').prefetch_related('steps').filter(
            user=request.user).first()
        if submission is None:
            return Response({"detail": "No onboarding found."}, status=404)
        return Response(OnboardingSubmissionSerializer(submission).data)


class StepDetailAPIView(APIView):
    authentication_classes = [OnboardingJWTAuthentication]
    permission_classes = [IsAuthenticated]

    def _get_step(self, request, pk):
        step = get_object_or_404(
            OnboardingStep.objects.select_related('submission'), pk=pk)
        if step.submission.user_id != request.user.id:
            return None
        return step

    def get(self, request, pk):
        step = self._get_step(request, pk)
        if step is None:
            return Response({"detail": "Not allowed"}, status=403)
        return Response(OnboardingStepSerializer(step).data)

    def put(self, request, pk):
        step = self._get_step(request, pk)
        if step is None:
            return Response({"detail": "Not allowed"}, status=403)

        serializer = StepSubmitSerializer(data=request.data, context={'step': step})
        serializer.is_valid(raise_exception=True)

        try:
            OnboardingService.submit_step(step, serializer.validated_data['step_data'])
        except ValidationError as e:
            return Response({"detail": e.messages[0], "current_status": step.status},
                            status=400)

        logger.info("Onboarding step submitted: step=%s type=%s user=%s",
                    step.id, step.step_type, request.user.id)
        return Response(OnboardingStepSerializer(step).data)


class StepReviewAPIView(APIView):
    permission_classes = [IsAuthenticated, IsManagerOrAdmin]

    def post(self, request, pk):
        step = get_object_or_404(
            OnboardingStep.objects.select_related('submission'), pk=pk)

        serializer = StepReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            OnboardingService.review_step(
                step, request.user, data['status'],
                comments=data.get('comments', ''),
                rejection_reason=data.get('rejection_reason', ''))
        except ValidationError as e:
            return Response({"detail": e.messages[0], "current_status": step.status},
                            status=400)

        submission = OnboardingSubmission.objects.get(pk=step.submission_id)
        logger.info("Onboarding step %s %s by user=%s", step.id, step.status, request.user.id)
        return Response({
            **OnboardingStepSerializer(step).data,
            "submission_status": submission.status,
            "employee": submission.employee_id,
        })


class OnboardingBackfillAPIView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    def post(self, request):
        processed, created = OnboardingService.backfill(request.user)
        return Response({
            "detail": f"Created onboarding submissions for {created} employees",
            "processed": processed,
            "created": created,
        })
