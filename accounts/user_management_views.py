"""
User Management Admin Views

Provides administrative endpoints for:
- Listing and reading users (admin, sub admin)
- Creating, updating and deleting users (admin)
- Admin-initiated password reset
- Ban / unban
"""

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from core.actions import action_response

from .permissions import AdminWriteSubAdminRead, IsAdmin
from .serializers import (
    PasswordResetSerializer,
    UserCreateSerializer,
    UserSerializer,
    UserUpdateSerializer,
)
from .services import UserService


class AdminUserListView(APIView):
    """
    GET  /api/admin/users/ - List users
    POST /api/admin/users/ - Create a user

    Request Body:
    {
        "email": "farmer@example.com",
        "password": "secret1",
        "full_name": "Farm Owner",
        "role": "FARMER"
    }
    """
    permission_classes = [AdminWriteSubAdminRead]

    def get(self, request):
        return action_response(UserService.list_users(), UserSerializer, many=True)

    def post(self, request):
        serializer = UserCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'success': False, 'error': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        result = UserService.create_user(**serializer.validated_data)
        return action_response(result, UserSerializer, success_status=status.HTTP_201_CREATED)


class AdminUserDetailView(APIView):
    """
    GET    /api/admin/users/{user_id}/
    PATCH  /api/admin/users/{user_id}/
    DELETE /api/admin/users/{user_id}/
    """
    permission_classes = [AdminWriteSubAdminRead]

    def get(self, request, user_id):
        return action_response(UserService.get_user(user_id), UserSerializer)

    def patch(self, request, user_id):
        serializer = UserUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'success': False, 'error': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        result = UserService.update_user(user_id, **serializer.validated_data)
        return action_response(result, UserSerializer)

    def delete(self, request, user_id):
        return action_response(UserService.delete_user(request.user, user_id))


class AdminUserResetPasswordView(APIView):
    """POST /api/admin/users/{user_id}/reset-password/  {"new_password": "..."}"""
    permission_classes = [IsAdmin]

    def post(self, request, user_id):
        serializer = PasswordResetSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'success': False, 'error': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        result = UserService.reset_user_password(user_id, serializer.validated_data['new_password'])
        return action_response(result)


class AdminUserToggleStatusView(APIView):
    """POST /api/admin/users/{user_id}/toggle-status/ - ban or unban"""
    permission_classes = [IsAdmin]

    def post(self, request, user_id):
        return action_response(UserService.toggle_user_status(request.user, user_id), UserSerializer)
