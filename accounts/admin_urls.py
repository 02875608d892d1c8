from django.urls import path

from .user_management_views import (
    AdminUserDetailView,
    AdminUserListView,
    AdminUserResetPasswordView,
    AdminUserToggleStatusView,
)

app_name = 'admin_users'

urlpatterns = [
    path('users/', AdminUserListView.as_view(), name='user-list'),
    path('users/<uuid:user_id>/', AdminUserDetailView.as_view(), name='user-detail'),
    path('users/<uuid:user_id>/reset-password/', AdminUserResetPasswordView.as_view(), name='user-reset-password'),
    path('users/<uuid:user_id>/toggle-status/', AdminUserToggleStatusView.as_view(), name='user-toggle-status'),
]
