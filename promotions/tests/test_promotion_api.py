from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from appointments.models import Appointment
from core.testing import make_admin, make_client, make_partner, order_data
from orders.models import Order
from promotions.models import Promotion


class PromotionAPITests(TestCase):

    def setUp(self):
        cache.clear()
        self.api = APIClient()
        self.admin = make_admin()
        self.client_user = make_client()
        self.partner = make_partner()

    def test_admin_creates_promotion(self):
        self.api.force_authenticate(user=self.admin)
        response = self.api.post('/api/promotions/', {
            'code': 'save10',
            'kind': 'percentage',
            'value': '10',
            'max_discount': '50000',
            'category': 'global',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['code'], 'SAVE10')

        response = self.api.post('/api/promotions/', {
            'code': 'SAVE10', 'kind': 'fixed', 'value': '1',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_percentage_over_100_is_invalid(self):
        self.api.force_authenticate(user=self.admin)
        response = self.api.post('/api/promotions/', {'code': 'X', 'kind': 'percentage', 'value': '150'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_client_cannot_create_or_delete(self):
        promotion = Promotion.objects.create(code='SAVE10', kind='percentage', value=Decimal('10'))
        self.api.force_authenticate(user=self.client_user)

        response = self.api.post('/api/promotions/', {'code': 'X', 'kind': 'fixed', 'value': '1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        response = self.api.delete(f'/api/promotions/{promotion.pk}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_deletes_promotion(self):
        promotion = Promotion.objects.create(code='SAVE10', kind='percentage', value=Decimal('10'))
        self.api.force_authenticate(user=self.admin)

        response = self.api.delete(f'/api/promotions/{promotion.pk}/')

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_client_lists_eligible_promotions(self):
        Promotion.objects.create(code='SAVE10', kind='percentage', value=Decimal('10'))
        self.api.force_authenticate(user=self.client_user)

        response = self.api.get(f'/api/promotions/client/{self.client_user.pk}/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['code'] for p in response.data], ['SAVE10'])

    def test_client_applies_code(self):
        Promotion.objects.create(code='SAVE10', kind='percentage', value=Decimal('10'))
        order = Order.objects.create(client=self.client_user, status=Order.Status.PROCESSING, **order_data())
        appointment = Appointment.objects.create(
            order=order, client=self.client_user, partner=self.partner, agreed_price=Decimal('500000')
        )
        self.api.force_authenticate(user=self.client_user)

        response = self.api.post('/api/promotions/apply/', {
            'appointment_id': appointment.pk, 'code': 'SAVE10',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['final_amount'], '450000.00')

        response = self.api.post('/api/promotions/apply/', {
            'appointment_id': appointment.pk, 'code': 'SAVE10',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
