# apps/core/tests/helpers.py

import json
from datetime import date

from apps.core.auth_service import auth_service
from apps.core.models import Project, User


class ApiClientMixin:
    """JSON helpers on top of django.test.Client"""

    def auth_headers(self, user):
        return {'HTTP_AUTHORIZATION': f'Bearer {auth_service.issue_token(user)}'}

    def get_json(self, url, user=None, params=None, **extra):
        if user is not None:
            extra.update(self.auth_headers(user))
        return self.client.get(url, params or {}, **extra)

    def send_json(self, method, url, payload=None, user=None, **extra):
        if user is not None:
            extra.update(self.auth_headers(user))
        body = payload if isinstance(payload, str) else json.dumps(payload or {})
        return getattr(self.client, method)(url, data=body, content_type='application/json', **extra)


def make_user(email='owner@example.com', name='Owner', password='secret123'):
    return User.objects.create_user(email=email, password=password, name=name)


def make_project(owner, name='Project', assignees=(), **fields):
    fields.setdefault('due_date', date(2030, 1, 15))
    project = Project.objects.create(name=name, created_by=owner, **fields)
    project.set_assignees(list(assignees))
    return project
