# apps/board/middleware.py

from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth.models import AnonymousUser

from apps.core.auth_service import AuthenticationFailed, auth_service


@database_sync_to_async
def get_user_for_token(token):
    try:
        claims = auth_service.decode_token(token)
    except AuthenticationFailed:
        return AnonymousUser()

    user = auth_service.user_from_claims(claims)
    if user is None or not user.is_active:
        return AnonymousUser()
    return user


class TokenAuthMiddleware(BaseMiddleware):
    """
    Authenticates WebSocket connections with ?token=<jwt>

    Browsers cannot set headers on a WebSocket handshake, so the bearer
    token travels in the query string. scope['user'] is the User or
    AnonymousUser.
    """

    async def __call__(self, scope, receive, send):
        query = parse_qs(scope.get('query_string', b'').decode())
        token = (query.get('token') or [''])[0]

        scope = dict(scope)
        scope['user'] = await get_user_for_token(token) if token else AnonymousUser()

        return await super().__call__(scope, receive, send)


def TokenAuthMiddlewareStack(inner):
    return TokenAuthMiddleware(inner)
