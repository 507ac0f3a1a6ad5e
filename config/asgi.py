# config/asgi.py

import os
from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

# Django must be set up before importing anything that touches models
django_asgi_app = get_asgi_application()

from channels.routing import ProtocolTypeRouter, URLRouter  # noqa: E402

from apps.board.middleware import TokenAuthMiddlewareStack  # noqa: E402
from apps.board.routing import websocket_urlpatterns  # noqa: E402

application = ProtocolTypeRouter({
    # Plain HTTP
    "http": django_asgi_app,

    # WebSocket authenticated with the same bearer token as the API
    "websocket": TokenAuthMiddlewareStack(
        URLRouter(websocket_urlpatterns)
    ),
})
