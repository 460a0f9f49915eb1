from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
import uuid


class UserRole(models.TextChoices):
    ADMIN = 'ADMIN', 'Administrador'
    USER = 'USER', 'Usuário'


class Page(models.TextChoices):
    """Dashboard pages guarded by per-user permission flags."""
    HOME = 'home', 'Início'
    COMPANIES = 'companies', 'Empresas'
    EMPLOYEES = 'employees', 'Colaboradores'
    VEHICLES = 'vehicles', 'Veículos'
    USERS = 'users', 'Usuários'
    TRAVEL_BOXES = 'travel_boxes', 'Caixa Viagem'
    TRAVEL_BOXES_ALL = 'travel_boxes_all', 'Caixa Viagem (todos)'
    CURRENT_ACCOUNTS = 'current_accounts', 'Conta Corrente'
    CURRENT_ACCOUNTS_ALL = 'current_accounts_all', 'Conta Corrente (todos)'


class UserManager(BaseUserManager):
    """Custom user manager for email-based authentication."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')

        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', UserRole.ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """Dashboard user, logs in with email."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255, db_index=True)
    first_name = models.CharField(max_length=100, blank=True)
    last_name = models.CharField(max_length=100, blank=True)
    cpf = models.CharField(max_length=14, blank=True)

    role = models.CharField(
        max_length=10,
        choices=UserRole.choices,
        default=UserRole.USER
    )

    # Permissions
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    # Hidden users stay in the database but disappear from lists
    is_hidden = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    last_login = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'users'
        indexes = [
            models.Index(fields=['email'], name='users_email_4b85f2_idx'),
            models.Index(fields=['created_at'], name='users_created_6541e9_idx'),
        ]
        ordering = ['first_name', 'last_name', 'email']

    def __str__(self):
        return self.email

    @property
    def is_admin(self):
        return self.role == UserRole.ADMIN or self.is_superuser

    def get_full_name(self):
        """Return 'first last' or the email prefix."""
        full_name = f"{self.first_name} {self.last_name}".strip()
        return full_name or self.email.split('@')[0]


class PagePermission(models.Model):
    """Access flags of one user on one dashboard page."""

    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='page_permissions'
    )
    page = models.CharField(max_length=30, choices=Page.choices)

    can_access = models.BooleanField(default=False)
    can_edit = models.BooleanField(default=False)
    can_delete = models.BooleanField(default=False)
    can_create = models.BooleanField(default=False)

    class Meta:
        db_table = 'page_permissions'
        unique_together = [['user', 'page']]
        ordering = ['page']

    def __str__(self):
        return f"{self.user.email} @ {self.page}"

    def as_flags(self):
        return {
            'can_access': self.can_access,
            'can_edit': self.can_edit,
            'can_delete': self.can_delete,
            'can_create': self.can_create,
        }
