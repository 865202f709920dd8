"""
Tests for models
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase
from django.contrib.auth import get_user_model

from core import models


def create_user(email='advisor@example.com', password='testpass123', **params):
    return get_user_model().objects.create_user(email=email, password=password, **params)


def create_property(advisor, **params):
    defaults = {
        'title': 'Casa en Palermo',
        'owner_name': 'Ana Gómez',
        'advisor': advisor,
    }
    defaults.update(params)
    return models.Property.objects.create(**defaults)


class TestModels(TestCase):
    """Tests for models"""

    # region <Tests fo User model>
    def test_create_user_with_email_successful(self):
        """Test creating a new user with an email is successful"""
        email = 'testemail@example.com'
        password = 'testpass123'
        user = get_user_model().objects.create_user(
            email=email,
            password=password,
            name='testuser'
        )

        self.assertEqual(user.email, email)
        self.assertTrue(user.check_password(password))
        self.assertEqual(user.role, models.User.ROLE_ASESOR)

    def test_new_user_email_normalized(self):
        """Test the email for a new user is normalized"""
        sample_emails = [
            ["test1@EXAMPLE.com", "test1@example.com"],
            ["Test2@Example.COM", "Test2@example.com"],
            ["TEST3@EXAMPLE.com", "TEST3@example.com"],
            ["test4@example.COM", "test4@example.com"],
        ]
        for email, expected in sample_emails:
            user = get_user_model().objects.create_user(email, "sample123")
            self.assertEqual(user.email, expected)

    def test_new_user_without_email_raises_error(self):
        """Test creating user with no email is raised error"""
        with self.assertRaises(ValueError):
            get_user_model().objects.create_user("", "sample123")

    def test_create_superuser(self):
        """Test creating a superuser"""
        user = get_user_model().objects.create_superuser(
            "test@example.com", "testpass123"
        )
        self.assertTrue(user.is_superuser)
        self.assertTrue(user.is_staff)
        self.assertEqual(user.role, models.User.ROLE_ADMIN)
        self.assertTrue(user.is_admin_role)
        self.assertFalse(user.is_advisor)

    def test_user_roles(self):
        """Test the role helpers of the user model"""
        advisor = create_user()
        reviewer = create_user(email='reviewer@example.com', role=models.User.ROLE_REVISOR)
        admin = create_user(email='admin@example.com', role=models.User.ROLE_ADMIN)

        self.assertTrue(advisor.is_advisor)
        self.assertFalse(advisor.is_admin_role)
        self.assertFalse(reviewer.is_advisor)
        self.assertFalse(reviewer.is_admin_role)
        self.assertTrue(admin.is_admin_role)
    # endregion

    # region <Tests for Property and Mandate models>
    def test_create_property_defaults_to_pending(self):
        """Test a new property starts pending review"""
        property_record = create_property(create_user())

        self.assertEqual(property_record.state, models.Property.STATE_PENDING)
        self.assertFalse(property_record.is_approved)
        self.assertIsNone(property_record.get_mandate())
        self.assertEqual(str(property_record), f"{property_record.id} - Casa en Palermo")

    def test_get_mandate_returns_attached_mandate(self):
        """Test get_mandate returns the one-to-one mandate"""
        property_record = create_property(create_user(), state=models.Property.STATE_APPROVED)
        mandate = models.Mandate.objects.create(
            property_record=property_record,
            term_days=90,
            amount=Decimal('90000'),
        )

        property_record = models.Property.objects.get(id=property_record.id)
        self.assertEqual(property_record.get_mandate(), mandate)
        self.assertEqual(mandate.state, models.Mandate.STATE_DRAFT)
        self.assertEqual(mandate.currency, models.Mandate.CURRENCY_ARS)

    def test_mandate_clean_requires_approved_property(self):
        """Test a mandate on a non approved property does not validate"""
        property_record = create_property(create_user())
        mandate = models.Mandate(property_record=property_record, term_days=90, amount=Decimal('1000'))

        with self.assertRaises(ValidationError):
            mandate.clean()

    def test_mark_state_signed_stamps_signature(self):
        """Test signing a mandate records the signer and the date"""
        property_record = create_property(create_user(), state=models.Property.STATE_APPROVED)
        mandate = models.Mandate.objects.create(property_record=property_record, term_days=30, amount=5)

        mandate.mark_state(models.Mandate.STATE_SIGNED, signed_by='  Ana Gómez ')
        mandate.refresh_from_db()

        self.assertTrue(mandate.is_signed)
        self.assertEqual(mandate.signed_by, 'Ana Gómez')
        self.assertIsNotNone(mandate.signed_at)

    def test_mark_state_sent_does_not_stamp_signature(self):
        """Test moving to ENVIADO leaves the signature fields empty"""
        property_record = create_property(create_user(), state=models.Property.STATE_APPROVED)
        mandate = models.Mandate.objects.create(property_record=property_record, term_days=30, amount=5)

        mandate.mark_state(models.Mandate.STATE_SENT, document_url='https://example.com/mandato.docx')
        mandate.refresh_from_db()

        self.assertEqual(mandate.state, models.Mandate.STATE_SENT)
        self.assertIsNone(mandate.signed_at)
        self.assertEqual(mandate.document_url, 'https://example.com/mandato.docx')

    def test_mark_state_invalid_raises(self):
        """Test an unknown state is rejected"""
        property_record = create_property(create_user(), state=models.Property.STATE_APPROVED)
        mandate = models.Mandate.objects.create(property_record=property_record, term_days=30, amount=5)

        with self.assertRaises(ValueError):
            mandate.mark_state('PERDIDO')

    def test_property_delete_cascades_to_mandate(self):
        """Test deleting a property deletes its mandate"""
        property_record = create_property(create_user(), state=models.Property.STATE_APPROVED)
        models.Mandate.objects.create(property_record=property_record, term_days=30, amount=5)

        property_record.delete()
        self.assertFalse(models.Mandate.objects.exists())
    # endregion
