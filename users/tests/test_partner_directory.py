"""
Tests for partner discovery and availability.
"""
from django.test import TestCase

from core.testing import make_partner
from users.services import PartnerDirectory


class PartnerDirectoryTests(TestCase):

    def setUp(self):
        self.directory = PartnerDirectory()

    def test_only_online_unlocked_approved_partners_are_eligible(self):
        eligible = make_partner('eligible@test.com', categories=('electricity', 'water'))
        make_partner('offline@test.com', online=False)
        make_partner('locked@test.com', locked=True)
        make_partner('pending@test.com', approved=False)
        make_partner('waterworks@test.com', categories=('water',))

        ids = self.directory.eligible_partner_ids('electricity')

        self.assertEqual(ids, [eligible.pk])

    def test_inactive_accounts_are_skipped(self):
        partner = make_partner()
        partner.is_active = False
        partner.save()

        self.assertEqual(self.directory.eligible_partner_ids('electricity'), [])

    def test_set_online(self):
        partner = make_partner(online=False)

        self.assertTrue(self.directory.set_online(partner.pk, True))

        partner.partner_profile.refresh_from_db()
        self.assertTrue(partner.partner_profile.is_online)
        self.assertIsNotNone(partner.partner_profile.last_online_at)

        self.directory.set_online(partner.pk, False)
        partner.partner_profile.refresh_from_db()
        self.assertFalse(partner.partner_profile.is_online)

    def test_set_online_unknown_partner(self):
        self.assertFalse(self.directory.set_online('c' * 24, True))
