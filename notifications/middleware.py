import logging
from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from rest_framework_simplejwt.tokens import AccessToken
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from urllib.parse import parse_qs

logger = logging.getLogger(__name__)

User = get_user_model()


@database_sync_to_async
def get_user_from_token(token_key):
    """
    Resolve the user behind a JWT access token.

    Args:
        token_key (str): JWT access token

    Returns:
        User | AnonymousUser: Authenticated user, or anonymous when the token is invalid
    """
    if not token_key or len(token_key) < 10:
        logger.warning("Empty or too short JWT token")
        return AnonymousUser()

    try:
        access_token = AccessToken(token_key)
        user = User.objects.get(id=access_token['user_id'])

        if not user.is_active:
            logger.warning(f"Inactive user tried to connect: {user.email}")
            return AnonymousUser()

        return user

    except (InvalidToken, TokenError) as e:
        logger.warning(f"Invalid JWT token: {e}")
        return AnonymousUser()
    except User.DoesNotExist:
        logger.warning("User from token not found")
        return AnonymousUser()


class JWTAuthMiddleware(BaseMiddleware):
    """
    Authenticates WebSockets with a JWT passed as a query parameter.

    Usage: ws://localhost:8000/ws/notifications/?token=<jwt_access_token>
    """

    async def __call__(self, scope, receive, send):
        query_params = parse_qs(scope.get('query_string', b'').decode('utf-8'))
        token = query_params.get('token', [None])[0]

        if token:
            scope['user'] = await get_user_from_token(token)
        else:
            scope['user'] = AnonymousUser()
            logger.debug("WebSocket connected without token (anonymous user)")

        return await super().__call__(scope, receive, send)
