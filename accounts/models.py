from django.contrib.auth.models import AbstractUser
from django.db import models
import uuid


class User(AbstractUser):
    """
    Custom User model for the back office.

    Email is the login identifier; `username` mirrors it so Django's
    auth machinery keeps working unchanged. Deactivated users (is_active=False)
    are treated as banned.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class UserRole(models.TextChoices):
        ADMIN = 'ADMIN', 'Admin'
        SUB_ADMIN = 'SUB_ADMIN', 'Sub Admin'
        FARMER = 'FARMER', 'Farmer'

    email = models.EmailField(unique=True)

    full_name = models.CharField(
        max_length=200,
        blank=True,
        help_text="Display name shown across the back office"
    )

    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.FARMER,
        db_index=True,
        help_text="User's role in the system"
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    class Meta:
        db_table = 'users'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.full_name or self.email} ({self.get_role_display()})"

    @property
    def is_admin(self):
        return self.role == self.UserRole.ADMIN

    @property
    def is_sub_admin(self):
        return self.role == self.UserRole.SUB_ADMIN

    @property
    def is_farmer(self):
        return self.role == self.UserRole.FARMER

    @property
    def can_view_admin(self):
        """Admins and sub admins may read every admin page."""
        return self.role in (self.UserRole.ADMIN, self.UserRole.SUB_ADMIN)

    @property
    def is_banned(self):
        return not self.is_active
