"""
Atomic partner balance mutation.

Every change is one conditional ``UPDATE ... SET balance = balance +/- x``
so concurrent settlements never lose a write. Nothing else in the project
writes ``PartnerProfile.balance``.
"""
import logging
from decimal import Decimal, InvalidOperation

from django.db.models import F
from django.utils.translation import gettext_lazy as _

from core.exceptions import BusinessRule, NotFound, ValidationError
from users.models import PartnerProfile

logger = logging.getLogger(__name__)


class BalanceNotFound(NotFound):
    default_detail = _('Partner balance not found.')
    default_code = 'balance_not_found'


class InsufficientBalance(BusinessRule):
    default_detail = _('Insufficient balance.')
    default_code = 'insufficient_balance'


def to_amount(value):
    """Positive ``Decimal`` from user or gateway input."""
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError({'amount': _('A valid amount is required.')})
    if not amount.is_finite() or amount <= 0:
        raise ValidationError({'amount': _('Amount must be greater than zero.')})
    return amount


class PartnerBalance:

    def get(self, user_id):
        balance = (
            PartnerProfile.objects.filter(user_id=user_id)
            .values_list('balance', flat=True)
            .first()
        )
        if balance is None:
            raise BalanceNotFound()
        return balance

    def credit(self, user_id, amount):
        """Add ``amount`` and return the new balance."""
        amount = to_amount(amount)
        updated = PartnerProfile.objects.filter(user_id=user_id).update(
            balance=F('balance') + amount
        )
        if not updated:
            logger.error(f"Credit of {amount} failed: no partner profile for {user_id}")
            raise BalanceNotFound()
        logger.info(f"Credited {amount} to partner {user_id}")
        return self.get(user_id)

    def debit(self, user_id, amount):
        """Subtract ``amount`` only if the balance covers it; return the new balance."""
        amount = to_amount(amount)
        updated = PartnerProfile.objects.filter(
            user_id=user_id, balance__gte=amount
        ).update(balance=F('balance') - amount)
        if not updated:
            if not PartnerProfile.objects.filter(user_id=user_id).exists():
                logger.error(f"Debit of {amount} failed: no partner profile for {user_id}")
                raise BalanceNotFound()
            logger.warning(f"Debit of {amount} refused for partner {user_id}: insufficient balance")
            raise InsufficientBalance()
        logger.info(f"Debited {amount} from partner {user_id}")
        return self.get(user_id)
