# apps/board/routing.py

from django.urls import re_path

from . import consumers

websocket_urlpatterns = [
    # Live project events for the authenticated user
    re_path(r'ws/projects/$', consumers.ProjectConsumer.as_asgi()),
]
