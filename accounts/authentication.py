from django.utils.translation import gettext_lazy as _
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken
from rest_framework_simplejwt.settings import api_settings

ONBOARDING_CLAIM = "onboarding"


class OnboardingJWTAuthentication(JWTAuthentication):
    """
    Accepts regular access tokens, plus onboarding tokens issued to users
    who stay inactive until their onboarding is completed.
    """

    def get_user(self, validated_token):
        if not validated_token.get(ONBOARDING_CLAIM):
            return super().get_user(validated_token)

        try:
            user_id = validated_token[api_settings.USER_ID_CLAIM]
        except KeyError:
            raise InvalidToken(
                _("Token contained no recognizable user identification"))

        try:
            user = self.user_model.objects.get(
                **{api_settings.USER_ID_FIELD: user_id})
        except self.user_model.DoesNotExist:
            raise AuthenticationFailed(_("User not found"), code="user_not_found")

        return user
