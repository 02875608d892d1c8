"""
User administration services.

Admins create, edit, ban and delete back office accounts. Every function
returns an ActionResult (see core.actions).
"""

import logging

from django.contrib.auth import get_user_model
from django.db import transaction

from core.actions import ActionError, ActionResult, action, get_or_404
from core.cache import revalidate_path

User = get_user_model()
logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
USERS_PATH = '/admin/users'


def _validate_password(password):
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ActionError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')


def _validate_role(role):
    if role not in User.UserRole.values:
        raise ActionError('Invalid user role')


class UserService:

    @staticmethod
    @action('Failed to get users')
    def list_users():
        return list(User.objects.select_related('farm').order_by('-created_at'))

    @staticmethod
    @action('Failed to get user')
    def get_user(user_id):
        return get_or_404(User, 'User not found', pk=user_id)

    @staticmethod
    @action('Failed to create user')
    def create_user(email, password, full_name='', role=User.UserRole.FARMER):
        email = (email or '').strip().lower()
        if not email:
            raise ActionError('Email is required')
        _validate_password(password)
        _validate_role(role)

        if User.objects.filter(email__iexact=email).exists():
            raise ActionError('A user with this email already exists')

        # Account and profile are one row; the transaction rolls both back together
        with transaction.atomic():
            user = User.objects.create_user(
                username=email,
                email=email,
                password=password,
                full_name=(full_name or '').strip(),
                role=role,
            )

        logger.info(f"User created: {user.email} ({user.role})")
        revalidate_path(USERS_PATH)
        return ActionResult.ok(user)

    @staticmethod
    @action('Failed to update user')
    def update_user(user_id, email=None, full_name=None, role=None):
        user = get_or_404(User, 'User not found', pk=user_id)

        if email is not None:
            email = email.strip().lower()
            if not email:
                raise ActionError('Email is required')
            if User.objects.filter(email__iexact=email).exclude(pk=user.pk).exists():
                raise ActionError('A user with this email already exists')
            user.email = email
            user.username = email
        if full_name is not None:
            user.full_name = full_name.strip()
        if role is not None:
            _validate_role(role)
            user.role = role

        user.save()
        revalidate_path(USERS_PATH)
        return ActionResult.ok(user)

    @staticmethod
    @action('Failed to delete user')
    def delete_user(actor, user_id):
        user = get_or_404(User, 'User not found', pk=user_id)
        if user.pk == actor.pk:
            raise ActionError('Cannot delete yourself')

        email = user.email
        user.delete()
        logger.info(f"User deleted: {email} by {actor.email}")
        revalidate_path(USERS_PATH)
        return ActionResult.ok()

    @staticmethod
    @action('Failed to reset password')
    def reset_user_password(user_id, new_password):
        _validate_password(new_password)
        user = get_or_404(User, 'User not found', pk=user_id)
        user.set_password(new_password)
        user.save(update_fields=['password', 'updated_at'])
        logger.info(f"Password reset for {user.email}")
        return ActionResult.ok()

    @staticmethod
    @action('Failed to update user status')
    def toggle_user_status(actor, user_id):
        """Ban an active user or lift the ban on a banned one."""
        user = get_or_404(User, 'User not found', pk=user_id)
        if user.pk == actor.pk:
            raise ActionError('Cannot ban yourself')

        user.is_active = not user.is_active
        user.save(update_fields=['is_active', 'updated_at'])
        logger.info(f"User {user.email} {'unbanned' if user.is_active else 'banned'} by {actor.email}")
        revalidate_path(USERS_PATH)
        return ActionResult.ok(user)
