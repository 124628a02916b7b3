"""
Open-socket counter per user, kept in the default cache.

A partner stays online while at least one socket is connected. The counter
lives in the shared cache (Redis in production) so every ASGI worker sees
the same number.
"""
from django.core.cache import cache

# Outlives any realistic socket; refreshed on every connect
PRESENCE_TIMEOUT = 60 * 60 * 24


def presence_key(user_id):
    return f'presence:sockets:{user_id}'


def socket_opened(user_id):
    """Returns the number of open sockets including this one."""
    key = presence_key(user_id)
    cache.add(key, 0, PRESENCE_TIMEOUT)
    count = cache.incr(key)
    cache.touch(key, PRESENCE_TIMEOUT)
    return count


def socket_closed(user_id):
    """Returns the number of sockets still open."""
    key = presence_key(user_id)
    try:
        count = cache.decr(key)
    except ValueError:
        # Counter expired or was never set
        return 0
    if count <= 0:
        cache.delete(key)
        return 0
    return count
