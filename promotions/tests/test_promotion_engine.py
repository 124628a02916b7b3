from datetime import timedelta
from decimal import Decimal

from django.test import TestCase, override_settings
from django.utils import timezone

from appointments.models import Appointment
from core.exceptions import BusinessRule, Conflict, NotFound
from core.testing import make_client, make_partner, order_data
from orders.models import Order
from promotions.models import Promotion, PromotionUsage
from promotions.services import PromotionEngine


class PromotionEngineTestCase(TestCase):

    def setUp(self):
        self.engine = PromotionEngine()
        self.client_user = make_client()
        self.partner = make_partner()

    def _appointment(self, agreed_price='1000000', client=None):
        client = client or self.client_user
        order = Order.objects.create(client=client, status=Order.Status.PROCESSING, **order_data())
        return Appointment.objects.create(
            order=order, client=client, partner=self.partner, agreed_price=Decimal(agreed_price)
        )

    def _promotion(self, code='SAVE10', **fields):
        fields.setdefault('kind', Promotion.Kind.PERCENTAGE)
        fields.setdefault('value', Decimal('10'))
        return Promotion.objects.create(code=code, **fields)


class ApplyTests(PromotionEngineTestCase):

    def test_percentage_discount_is_capped(self):
        self._promotion(max_discount=Decimal('50000'))
        appointment = self._appointment('1000000')

        appointment = self.engine.apply(appointment.pk, 'SAVE10', self.client_user.pk)

        self.assertEqual(appointment.discount, Decimal('50000'))
        self.assertEqual(appointment.final_amount, Decimal('950000'))

    def test_fixed_discount(self):
        self._promotion('MINUS30K', kind=Promotion.Kind.FIXED, value=Decimal('30000'))
        appointment = self._appointment('200000')

        appointment = self.engine.apply(appointment.pk, 'minus30k', self.client_user.pk)

        self.assertEqual(appointment.promotion_code, 'MINUS30K')
        self.assertEqual(appointment.final_amount, Decimal('170000'))

    def test_apply_records_usage(self):
        promotion = self._promotion()
        appointment = self._appointment()

        self.engine.apply(appointment.pk, 'SAVE10', self.client_user.pk)

        promotion.refresh_from_db()
        self.assertEqual(promotion.usage_count, 1)
        usage = PromotionUsage.objects.get(promotion=promotion)
        self.assertEqual(usage.user, self.client_user)
        self.assertEqual(usage.appointment, appointment)

    def test_unknown_or_inactive_code(self):
        self._promotion('OFF', is_active=False)
        appointment = self._appointment()

        with self.assertRaises(NotFound):
            self.engine.apply(appointment.pk, 'NOPE', self.client_user.pk)
        with self.assertRaises(NotFound):
            self.engine.apply(appointment.pk, 'OFF', self.client_user.pk)

    def test_missing_appointment(self):
        self._promotion()
        with self.assertRaises(NotFound):
            self.engine.apply('b' * 24, 'SAVE10', self.client_user.pk)

    def test_closed_appointment_rejects_promotion(self):
        promotion = self._promotion()
        for closed in (Appointment.Status.COMPLETED, Appointment.Status.CANCELLED):
            appointment = self._appointment()
            appointment.status = closed
            appointment.save()

            with self.assertRaises(BusinessRule):
                self.engine.apply(appointment.pk, 'SAVE10', self.client_user.pk)

            appointment.refresh_from_db()
            self.assertEqual(appointment.discount, Decimal('0'))
            self.assertEqual(appointment.final_amount, Decimal('1000000'))

        promotion.refresh_from_db()
        self.assertEqual(promotion.usage_count, 0)
        self.assertFalse(PromotionUsage.objects.exists())

    def test_expired_promotion(self):
        self._promotion(
            start_date=timezone.now() - timedelta(days=10),
            end_date=timezone.now() - timedelta(days=1),
        )
        with self.assertRaises(BusinessRule):
            self.engine.apply(self._appointment().pk, 'SAVE10', self.client_user.pk)

    def test_per_user_cap(self):
        self._promotion()
        self.engine.apply(self._appointment().pk, 'SAVE10', self.client_user.pk)

        with self.assertRaises(BusinessRule):
            self.engine.apply(self._appointment().pk, 'SAVE10', self.client_user.pk)

    def test_global_cap(self):
        promotion = self._promotion(usage_limit=1)
        other = make_client('other@test.com')
        self.engine.apply(self._appointment().pk, 'SAVE10', self.client_user.pk)

        with self.assertRaises(BusinessRule):
            self.engine.apply(self._appointment(client=other).pk, 'SAVE10', other.pk)
        promotion.refresh_from_db()
        self.assertEqual(promotion.usage_count, 1)

    def test_target_list_excludes_other_clients(self):
        promotion = self._promotion(category=Promotion.Category.PERSONAL)
        promotion.target_clients.add(self.client_user)
        other = make_client('other@test.com')

        with self.assertRaises(BusinessRule):
            self.engine.apply(self._appointment(client=other).pk, 'SAVE10', other.pk)

    def test_min_order_value(self):
        self._promotion(min_order_value=Decimal('300000'))

        with self.assertRaises(BusinessRule):
            self.engine.apply(self._appointment('200000').pk, 'SAVE10', self.client_user.pk)

    def test_failed_apply_leaves_appointment_untouched(self):
        self._promotion(min_order_value=Decimal('300000'))
        appointment = self._appointment('200000')

        with self.assertRaises(BusinessRule):
            self.engine.apply(appointment.pk, 'SAVE10', self.client_user.pk)

        appointment.refresh_from_db()
        self.assertEqual(appointment.discount, Decimal('0'))
        self.assertFalse(PromotionUsage.objects.exists())


class EligibilityTests(PromotionEngineTestCase):

    def test_eligibility_per_category(self):
        other = make_client('other@test.com')
        now = timezone.now()
        self._promotion('GLOBAL', category=Promotion.Category.GLOBAL)
        mine = self._promotion('MINE', category=Promotion.Category.PERSONAL)
        mine.target_clients.add(self.client_user)
        theirs = self._promotion('THEIRS', category=Promotion.Category.WELCOME)
        theirs.target_clients.add(other)
        self._promotion('LIVE', category=Promotion.Category.EVENT, start_date=now - timedelta(days=1))
        self._promotion(
            'OVER', category=Promotion.Category.EVENT,
            start_date=now - timedelta(days=5), end_date=now - timedelta(days=1),
        )
        self._promotion('SOON', category=Promotion.Category.EVENT, start_date=now + timedelta(days=1))
        self._promotion('DISABLED', is_active=False)

        codes = {p.code for p in self.engine.list_eligible(self.client_user.pk)}

        self.assertEqual(codes, {'GLOBAL', 'MINE', 'LIVE'})

    def test_used_up_promotions_are_not_listed(self):
        self._promotion('ONCE', category=Promotion.Category.GLOBAL)
        self._promotion('TWICE', category=Promotion.Category.GLOBAL, usage_per_user=2)
        self.engine.apply(self._appointment().pk, 'ONCE', self.client_user.pk)
        self.engine.apply(self._appointment().pk, 'TWICE', self.client_user.pk)

        codes = {p.code for p in self.engine.list_eligible(self.client_user.pk)}

        self.assertEqual(codes, {'TWICE'})


class AdministrationTests(PromotionEngineTestCase):

    def test_duplicate_code_is_a_conflict(self):
        self._promotion('SAVE10')

        with self.assertRaises(Conflict):
            self.engine.create({'code': 'save10', 'kind': 'fixed', 'value': Decimal('1')})

    def test_remove(self):
        promotion = self._promotion()

        self.engine.remove(promotion.pk)

        self.assertFalse(Promotion.objects.exists())
        with self.assertRaises(NotFound):
            self.engine.remove(promotion.pk)

    @override_settings(WELCOME_PROMOTION_CODE='WELCOME50K')
    def test_new_clients_join_welcome_promotion(self):
        welcome = self._promotion(
            'WELCOME50K', kind=Promotion.Kind.FIXED, value=Decimal('50000'),
            category=Promotion.Category.WELCOME,
        )

        newcomer = make_client('newcomer@test.com')
        make_partner('newpartner@test.com')

        self.assertEqual(list(welcome.target_clients.all()), [newcomer])
        self.assertIn('WELCOME50K', {p.code for p in self.engine.list_eligible(newcomer.pk)})
