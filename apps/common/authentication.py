from rest_framework.authentication import TokenAuthentication
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import SAFE_METHODS


class BearerTokenAuthentication(TokenAuthentication):
    """DRF token authentication read from an ``Authorization: Bearer <token>`` header."""
    keyword = 'Bearer'


class OptionalBearerTokenAuthentication(BearerTokenAuthentication):
    """
    Bearer authentication for endpoints that are public to read.

    A stale or unknown token on a read is treated as anonymous, so listings
    stay browsable; writes still fail with 401.
    """

    def authenticate(self, request):
        try:
            return super().authenticate(request)
        except AuthenticationFailed:
            if request.method in SAFE_METHODS:
                return None
            raise
