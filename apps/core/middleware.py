# apps/core/middleware.py

from .auth_service import auth_service


class TokenAuthenticationMiddleware:
    """
    Reads the 'Authorization: Bearer <jwt>' header on every request

    Sets request.auth_claims to the decoded payload (None when missing or
    invalid). Loading the user and rejecting the request is left to the
    token_required decorator, so public views pay nothing for it.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.auth_claims = auth_service.claims_from_header(request.headers.get('Authorization'))
        request.auth_user = None

        response = self.get_response(request)

        # Handy when reading access logs
        if request.auth_user is not None:
            response['X-Authenticated-User'] = str(request.auth_user.pk)

        return response
