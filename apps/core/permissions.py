# apps/core/permissions.py

import logging
from functools import wraps

from django.conf import settings
from django.core.exceptions import ValidationError
from django.views.decorators.csrf import csrf_exempt

from .auth_service import auth_service
from .utils import api_error, first_error

logger = logging.getLogger(__name__)


class DashboardPermissions:
    """
    Permission rules of the dashboard

    Projects belong to the user who created them; nobody else can see or
    change them.
    """

    @staticmethod
    def is_authenticated(user):
        return user is not None and user.is_active

    @staticmethod
    def is_owner(user, project):
        return DashboardPermissions.is_authenticated(user) and project.created_by_id == user.pk

    @staticmethod
    def can_view_project(user, project):
        return DashboardPermissions.is_owner(user, project)

    @staticmethod
    def can_edit_project(user, project):
        return DashboardPermissions.is_owner(user, project)

    @staticmethod
    def can_delete_project(user, project):
        return DashboardPermissions.is_owner(user, project)


# Decorators for views

def api_view(methods):
    """
    Decorator for JSON API views

    - answers disallowed methods with a 405 envelope
    - turns ValidationError into a 400 envelope
    - logs unexpected exceptions and answers with a 500 envelope
    - exempts the view from CSRF (clients authenticate with bearer tokens)
    """
    allowed = [method.upper() for method in methods]

    def decorator(view_func):
        @csrf_exempt
        @wraps(view_func)
        def wrapped_view(request, *args, **kwargs):
            if request.method not in allowed:
                response = api_error('Method not allowed', status=405)
                response['Allow'] = ', '.join(allowed)
                return response

            try:
                return view_func(request, *args, **kwargs)
            except ValidationError as e:
                return api_error(first_error(e), status=400)
            except Exception as e:
                logger.exception("Unhandled error in %s", view_func.__name__)
                message = str(e) if settings.DEBUG else 'Internal server error'
                return api_error(message, status=500)

        return wrapped_view

    return decorator


def token_required(view_func=None, *, user_must_exist=True):
    """
    Decorator that requires a valid bearer token

    Loads the user into request.auth_user. With user_must_exist=False a
    valid token for a deleted account still reaches the view, which then
    decides what to answer.
    """

    def decorator(func):
        @wraps(func)
        def wrapped_view(request, *args, **kwargs):
            claims = getattr(request, 'auth_claims', None)
            if claims is None:
                claims = auth_service.claims_from_header(request.headers.get('Authorization'))
                request.auth_claims = claims

            if claims is None:
                return api_error('Unauthorized', status=401)

            request.auth_user = auth_service.user_from_claims(claims)
            if request.auth_user is None and user_must_exist:
                return api_error('Unauthorized', status=401)

            return func(request, *args, **kwargs)

        return wrapped_view

    if view_func is not None:
        return decorator(view_func)
    return decorator
