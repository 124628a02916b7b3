from rest_framework.throttling import UserRateThrottle


class PaymentIntentThrottle(UserRateThrottle):
    """
    Limits how fast a user can create payment intents (30 per minute).
    Every intent is a pending row until the webhook or cleanup removes it.
    """
    scope = 'payment_intents'

    def get_cache_key(self, request, view):
        if request.user.is_authenticated:
            ident = request.user.pk
        else:
            ident = self.get_ident(request)

        return self.cache_format % {
            'scope': self.scope,
            'ident': ident
        }
