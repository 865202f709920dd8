from django.contrib.auth.models import (
    AbstractBaseUser,
    BaseUserManager,
    PermissionsMixin
)
from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.core.validators import MinValueValidator
from django.conf import settings
from django.db import models
from django.utils import timezone


# region <Custom user model with email login and brokerage role>
class UserManager(BaseUserManager):
    """Manager for users"""

    def create_user(self, email, password=None, **extra_fields):
        """Creates and saves a new user"""
        if not email:
            raise ValueError('Users must have an email address')

        user = self.model(email=self.normalize_email(email), **extra_fields)
        user.set_password(password)
        user.save(using=self._db)

        return user

    def create_superuser(self, email, password):
        """Creates and saves a superuser with the given email and password."""
        user = self.create_user(email, password)
        user.is_staff = True
        user.is_active = True
        user.is_superuser = True
        user.role = User.ROLE_ADMIN
        user.save(using=self._db)
        return user


class User(AbstractBaseUser, PermissionsMixin):
    """User in the system"""
    ROLE_ADMIN = 'ADMIN'
    ROLE_REVISOR = 'REVISOR'
    ROLE_ASESOR = 'ASESOR'
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Administrador'),
        (ROLE_REVISOR, 'Revisor'),
        (ROLE_ASESOR, 'Asesor'),
    ]

    email = models.EmailField(unique=True, max_length=255)
    name = models.CharField(max_length=255)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_ASESOR)
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    objects = UserManager()

    USERNAME_FIELD = 'email'

    def __str__(self):
        return f"{self.name}  -  {self.email}"

    @property
    def is_admin_role(self):
        return self.is_superuser or self.role == self.ROLE_ADMIN

    @property
    def is_advisor(self):
        return self.role == self.ROLE_ASESOR and not self.is_superuser


# endregion


class Property(models.Model):
    """Property case record ("expediente") tracked through approval"""
    STATE_IN_PREPARATION = 'EN_PREPARACION'
    STATE_PENDING = 'PENDIENTE'
    STATE_APPROVED = 'APROBADO'
    STATE_REJECTED = 'RECHAZADO'
    STATE_CHOICES = [
        (STATE_IN_PREPARATION, 'En preparación'),
        (STATE_PENDING, 'Pendiente'),
        (STATE_APPROVED, 'Aprobado'),
        (STATE_REJECTED, 'Rechazado'),
    ]

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    owner_name = models.CharField(max_length=255)
    property_type = models.CharField(max_length=100, blank=True, null=True)
    address = models.CharField(max_length=255, blank=True, null=True)
    cadastral_reference = models.CharField(max_length=100, blank=True, null=True,
                                           help_text="Partida inmobiliaria")
    locality = models.CharField(max_length=150, blank=True, null=True)
    owners = models.TextField(blank=True, null=True,
                              help_text="JSON encoded list of up to 3 owners")
    advisor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='properties'
    )
    state = models.CharField(max_length=20, choices=STATE_CHOICES, default=STATE_PENDING)
    review_notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Property"
        verbose_name_plural = "Properties"

    def __str__(self):
        return f"{self.id} - {self.title}"

    @property
    def is_approved(self):
        return self.state == self.STATE_APPROVED

    def get_mandate(self):
        """Return the attached mandate or None"""
        try:
            return self.mandate
        except ObjectDoesNotExist:
            return None


class Mandate(models.Model):
    """Sales mandate tied 1:1 to an approved property"""
    CURRENCY_ARS = 'ARS'
    CURRENCY_USD = 'USD'
    CURRENCY_CHOICES = [
        (CURRENCY_ARS, 'Pesos argentinos'),
        (CURRENCY_USD, 'Dólares estadounidenses'),
    ]

    STATE_DRAFT = 'BORRADOR'
    STATE_SENT = 'ENVIADO'
    STATE_SIGNED = 'FIRMADO'
    STATE_VOID = 'ANULADO'
    STATE_CHOICES = [
        (STATE_DRAFT, 'Borrador'),
        (STATE_SENT, 'Enviado'),
        (STATE_SIGNED, 'Firmado'),
        (STATE_VOID, 'Anulado'),
    ]

    property_record = models.OneToOneField(
        Property,
        on_delete=models.CASCADE,
        related_name='mandate'
    )
    term_days = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    amount = models.DecimalField(max_digits=14, decimal_places=2,
                                 validators=[MinValueValidator(0)])
    currency = models.CharField(max_length=3, choices=CURRENCY_CHOICES, default=CURRENCY_ARS)
    notes = models.TextField(blank=True, null=True)
    state = models.CharField(max_length=10, choices=STATE_CHOICES, default=STATE_DRAFT)
    signed_by = models.CharField(max_length=255, blank=True, null=True)
    signed_at = models.DateTimeField(blank=True, null=True)
    document_url = models.CharField(max_length=500, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Mandate"
        verbose_name_plural = "Mandates"

    def __str__(self):
        return f"Mandate {self.id} - property {self.property_record_id}"

    @property
    def is_signed(self):
        return self.state == self.STATE_SIGNED

    def clean(self):
        if self.property_record_id and not self.property_record.is_approved:
            raise ValidationError("A mandate can only be attached to an approved property")

    def mark_state(self, state, signed_by=None, document_url=None):
        """Move the mandate to ``state``; signing stamps the signature date"""
        if state not in dict(self.STATE_CHOICES):
            raise ValueError(f"Invalid mandate state: {state}")

        self.state = state
        if state == self.STATE_SIGNED:
            self.signed_at = timezone.now()
            if signed_by:
                self.signed_by = signed_by.strip()
        if document_url:
            self.document_url = document_url.strip()
        self.save()
        return self
