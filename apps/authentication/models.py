"""
Authentication models.
User is the custom user model: covers Admin, Staff and Driver roles.
"""

from django.db import models
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin, BaseUserManager


class UserManager(BaseUserManager):
    def create_user(self, username, password=None, **extra):
        if not username:
            raise ValueError("Username is required.")
        user = self.model(username=username, **extra)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, username, password, **extra):
        extra.setdefault("is_staff", True)
        extra.setdefault("is_superuser", True)
        extra.setdefault("role", User.Role.ADMIN)
        return self.create_user(username, password, **extra)


class User(AbstractBaseUser, PermissionsMixin):
    """An operator of the back office or a driver, identified by username."""

    class Role(models.TextChoices):
        ADMIN  = "admin",  "Admin"
        STAFF  = "staff",  "Staff"
        DRIVER = "driver", "Driver"

    username   = models.CharField(
        max_length=150, unique=True,
        error_messages={"unique": "A user with that username already exists."},
    )
    role       = models.CharField(max_length=10, choices=Role.choices, default=Role.STAFF)
    is_active  = models.BooleanField(default=True)
    is_staff   = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    USERNAME_FIELD  = "username"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "User"
        indexes = [models.Index(fields=["role"], name="auth_user_role_idx")]

    def __str__(self):
        return f"{self.username} ({self.role})"
