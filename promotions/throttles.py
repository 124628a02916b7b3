from rest_framework.throttling import UserRateThrottle


class PromotionApplyThrottle(UserRateThrottle):
    """
    Limits code attempts to 20 per minute per user so codes cannot be guessed by brute force.
    """
    scope = 'promotion_apply'

    def get_cache_key(self, request, view):
        if request.user.is_authenticated:
            ident = request.user.pk
        else:
            ident = self.get_ident(request)

        return self.cache_format % {
            'scope': self.scope,
            'ident': ident
        }
