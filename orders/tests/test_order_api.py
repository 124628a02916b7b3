"""
Order endpoints: posting, bidding, selection and cancellation.
"""
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from core.testing import make_client, make_partner, order_data
from orders.models import Order


def _payload(**overrides):
    data = order_data(**overrides)
    data['scheduled_for'] = data['scheduled_for'].isoformat()
    data['latitude'] = str(data['latitude'])
    data['longitude'] = str(data['longitude'])
    return data


class OrderAPITests(TestCase):

    def setUp(self):
        self.api = APIClient()
        self.client_user = make_client()
        self.partner = make_partner()
        self.list_url = '/api/orders/'

    def _create_order(self):
        self.api.force_authenticate(user=self.client_user)
        response = self.api.post(self.list_url, _payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        return response.data['id']

    def test_unauthenticated_cannot_post(self):
        response = self.api.post(self.list_url, _payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_partner_cannot_post_order(self):
        self.api.force_authenticate(user=self.partner)
        response = self.api.post(self.list_url, _payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_client_creates_order(self):
        order_id = self._create_order()

        order = Order.objects.get(pk=order_id)
        self.assertEqual(order.client, self.client_user)
        self.assertEqual(len(order_id), 24)

    def test_second_pending_order_returns_409(self):
        self._create_order()
        response = self.api.post(self.list_url, _payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_invalid_coordinates_return_400(self):
        self.api.force_authenticate(user=self.client_user)
        response = self.api.post(self.list_url, _payload(latitude='123.0'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('latitude', response.data)

    def test_list_by_types(self):
        self._create_order()
        self.api.force_authenticate(user=self.partner)

        response = self.api.get('/api/orders/types/', {'types': 'electricity,water'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)

        response = self.api.get('/api/orders/types/', {'types': 'locksmith'})
        self.assertEqual(response.data['count'], 0)

    def test_list_by_client(self):
        self._create_order()
        response = self.api.get(f'/api/orders/client/{self.client_user.pk}/')
        self.assertEqual(response.data['count'], 1)

    def test_bid_select_flow(self):
        order_id = self._create_order()

        self.api.force_authenticate(user=self.partner)
        response = self.api.patch(
            f'/api/orders/{order_id}/applicants/', {'offered_price': '200000'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        response = self.api.patch(
            f'/api/orders/{order_id}/applicants/', {'offered_price': '190000'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

        self.api.force_authenticate(user=self.client_user)
        response = self.api.patch(
            f'/api/orders/{order_id}/select/', {'partner_id': self.partner.pk}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['order']['status'], 'processing')
        self.assertEqual(response.data['appointment']['status'], 1)

        response = self.api.patch(
            f'/api/orders/{order_id}/select/', {'partner_id': self.partner.pk}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)

    def test_other_client_cannot_select(self):
        order_id = self._create_order()
        intruder = make_client('intruder@test.com')
        self.api.force_authenticate(user=intruder)

        response = self.api.patch(
            f'/api/orders/{order_id}/select/', {'partner_id': self.partner.pk}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_partner_withdraws_own_bid(self):
        order_id = self._create_order()
        self.api.force_authenticate(user=self.partner)
        self.api.patch(f'/api/orders/{order_id}/applicants/', {'offered_price': '200000'}, format='json')

        response = self.api.patch(f'/api/orders/{order_id}/cancel-applicant/{self.partner.pk}/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['applicants'], [])

    def test_owner_cancels_order(self):
        order_id = self._create_order()

        response = self.api.patch(f'/api/orders/{order_id}/cancel/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'cancelled')

    def test_owner_edits_description(self):
        order_id = self._create_order()

        response = self.api.patch(f'/api/orders/{order_id}/', {'description': 'Updated'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['description'], 'Updated')

    def test_missing_order_returns_404(self):
        self.api.force_authenticate(user=self.partner)
        response = self.api.patch(f'/api/orders/{"a" * 24}/applicants/', {'offered_price': '1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
