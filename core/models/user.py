"""
ShopUser (custom user) model – front-desk and manager accounts.
"""
from django.db import models
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin, BaseUserManager
from .mixins import TimestampMixin


class ShopUserManager(BaseUserManager):
    """Custom manager for the ShopUser model."""

    def create_user(self, username, password=None, **extra_fields):
        if not username:
            raise ValueError("Username is required")
        extra_fields.setdefault('display_name', username)
        user = self.model(username=username, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, username, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('role', ShopUser.ROLE_MANAGER)
        return self.create_user(username, password, **extra_fields)


class ShopUser(AbstractBaseUser, PermissionsMixin, TimestampMixin):
    """
    A person who signs in to the POS.

    AUTH_USER_MODEL = 'core.ShopUser'
    Reception can run the roster, record sales and expenses; managers can
    additionally administer staff, pricing, payouts and see the longer reports.
    """

    ROLE_RECEPTION = 'reception'
    ROLE_MANAGER   = 'manager'
    ROLE_CHOICES = [
        (ROLE_RECEPTION, 'Reception'),
        (ROLE_MANAGER,   'Manager'),
    ]

    id = models.AutoField(primary_key=True)
    username = models.CharField(max_length=80, unique=True)
    display_name = models.CharField(max_length=150, blank=True, default='')

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_RECEPTION)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    objects = ShopUserManager()

    USERNAME_FIELD = 'username'
    REQUIRED_FIELDS = ['display_name']

    class Meta:
        db_table = 'shop_users'
        verbose_name = 'Shop User'
        verbose_name_plural = 'Shop Users'

    def __str__(self):
        return f'{self.username}'

    @property
    def name(self):
        return self.display_name or self.username

    @property
    def is_manager(self):
        """Superusers always count as managers."""
        return self.is_superuser or self.role == self.ROLE_MANAGER

    @property
    def role_display(self):
        if self.is_superuser:
            return 'Superuser'
        return dict(self.ROLE_CHOICES).get(self.role, self.role.capitalize())
