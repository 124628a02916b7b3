from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase
from rest_framework.exceptions import PermissionDenied

from appointments.models import Appointment, Review
from appointments.services import ReviewService
from core.exceptions import BusinessRule, Conflict, NotFound
from core.testing import make_client, make_partner, order_data
from orders.models import Order


class ReviewTestCase(TestCase):
    """Review creation rules and the partner rating signal."""

    def setUp(self):
        self.service = ReviewService()
        self.client_user = make_client()
        self.partner = make_partner()
        self.profile = self.partner.partner_profile

    def _appointment(self, status=Appointment.Status.COMPLETED, client=None):
        client = client or self.client_user
        order = Order.objects.create(client=client, status=Order.Status.COMPLETED, **order_data())
        return Appointment.objects.create(order=order, client=client, partner=self.partner, status=status)

    def test_review_of_completed_appointment(self):
        appointment = self._appointment()

        review = self.service.create(appointment.pk, self.client_user, {'rating': 5, 'comment': 'Great'})

        self.assertEqual(review.partner, self.partner)
        self.profile.refresh_from_db()
        self.assertEqual(self.profile.average_rating, Decimal('5.00'))

    def test_rating_follows_multiple_reviews(self):
        for rating in (5, 3, 4):
            self.service.create(self._appointment().pk, self.client_user, {'rating': rating})

        self.profile.refresh_from_db()
        self.assertEqual(self.profile.average_rating, Decimal('4.00'))

    def test_second_review_is_a_conflict(self):
        appointment = self._appointment()
        self.service.create(appointment.pk, self.client_user, {'rating': 4})

        with self.assertRaises(Conflict):
            self.service.create(appointment.pk, self.client_user, {'rating': 1})

    def test_unfinished_appointment_cannot_be_rated(self):
        appointment = self._appointment(status=Appointment.Status.WORKING)

        with self.assertRaises(BusinessRule):
            self.service.create(appointment.pk, self.client_user, {'rating': 4})

    def test_only_the_client_can_rate(self):
        appointment = self._appointment()
        stranger = make_client('stranger@test.com')

        with self.assertRaises(PermissionDenied):
            self.service.create(appointment.pk, stranger, {'rating': 4})

    def test_missing_appointment(self):
        with self.assertRaises(NotFound):
            self.service.create('e' * 24, self.client_user, {'rating': 4})

    @patch('appointments.signals.logger')
    def test_rating_recalculated_on_delete(self, mock_logger):
        first = self.service.create(self._appointment().pk, self.client_user, {'rating': 5})
        self.service.create(self._appointment().pk, self.client_user, {'rating': 3})

        first.delete()

        self.profile.refresh_from_db()
        self.assertEqual(self.profile.average_rating, Decimal('3.00'))
        self.assertIn('recalculated', mock_logger.info.call_args[0][0])

    def test_summary_for_partner(self):
        self.service.create(self._appointment().pk, self.client_user, {'rating': 5})
        self.service.create(self._appointment().pk, self.client_user, {'rating': 4})

        summary = self.service.summary_for_partner(self.partner.pk)

        self.assertEqual(summary['total'], 2)
        self.assertEqual(summary['average'], 4.5)
        self.assertEqual(summary['reviews'].count(), 2)

    def test_review_deleted_with_all_reviews_resets_rating(self):
        review = self.service.create(self._appointment().pk, self.client_user, {'rating': 2})

        Review.objects.filter(pk=review.pk).delete()

        self.profile.refresh_from_db()
        self.assertEqual(self.profile.average_rating, Decimal('0.00'))
