"""
Factory Boy factories for authentication models.

Usage:
    from authentication.tests.factories import UserFactory

    buyer = UserFactory()
    vendor = UserFactory(display_name="Harbour Events")
    admin = UserFactory(is_superuser=True, is_staff=True)
"""

import factory

from authentication.models import User


class UserFactory(factory.django.DjangoModelFactory):
    """
    Factory for User model.

    By default, users are active, non-staff accounts with a usable password.
    """

    class Meta:
        model = User
        skip_postgeneration_save = True

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    display_name = factory.Sequence(lambda n: f"User {n}")
    is_active = True
    is_staff = False

    @factory.post_generation
    def password(self, create, extracted, **kwargs):
        """Set password after user creation."""
        self.set_password(extracted or "testpass123")
        if create:
            self.save(update_fields=["password"])
