"""
Builders shared by the test suites of every app.
"""
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.utils import timezone

from users.models import PartnerSkill

User = get_user_model()

PASSWORD = 'testpass123'


def make_client(email='client@test.com', **extra):
    extra.setdefault('first_name', 'Client')
    return User.objects.create_user(email=email, password=PASSWORD, role='CLIENT', **extra)


def make_admin(email='admin@test.com'):
    return User.objects.create_user(email=email, password=PASSWORD, role='ADMIN', is_staff=True)


def make_partner(email='partner@test.com', categories=('electricity',), online=True,
                 locked=False, balance=Decimal('0.00'), approved=True):
    """PARTNER user whose profile (created by signal) is online with the given skills."""
    user = User.objects.create_user(
        email=email, password=PASSWORD, role='PARTNER', first_name='Partner'
    )
    profile = user.partner_profile
    profile.is_online = online
    profile.is_locked = locked
    profile.balance = balance
    profile.save()
    for category in categories:
        PartnerSkill.objects.create(profile=profile, category=category, is_approved=approved)
    return user


def order_data(**overrides):
    data = {
        'service': 'Replace wall socket',
        'category': 'electricity',
        'description': 'The living room socket sparks when used.',
        'images': [],
        'scheduled_for': timezone.now() + timedelta(days=1),
        'address': '12 Nguyen Hue, District 1',
        'latitude': Decimal('10.773996'),
        'longitude': Decimal('106.703560'),
        'price_range': '100000-300000',
    }
    data.update(overrides)
    return data
