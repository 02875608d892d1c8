"""
Authentication endpoints.

Login and token refresh are stock simplejwt views; banned users (is_active
False) are refused by simplejwt itself.

- POST /api/auth/login/
- POST /api/auth/token/refresh/
- POST /api/auth/logout/
- GET  /api/auth/me/
"""

import logging

from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView

from .serializers import CustomTokenObtainPairSerializer, UserSerializer

logger = logging.getLogger(__name__)


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer


class CurrentUserView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user).data)


class LogoutView(APIView):
    """Blacklist the caller's refresh token."""
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        token = request.data.get('refresh') or request.data.get('refresh_token')
        if not token:
            return Response(
                {'success': False, 'error': 'Refresh token is required'},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            RefreshToken(token).blacklist()
        except TokenError as exc:
            logger.warning(f"Logout with unusable token for {request.user.email}: {exc}")
            return Response({'success': False, 'error': str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        logger.info(f"User {request.user.email} logged out")
        return Response({'success': True})
