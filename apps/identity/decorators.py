from functools import wraps
from typing import Callable

from django.http import HttpRequest

from .jwt_auth import authenticate_request


def bearer_required(view_func: Callable):
    """
    Decorator to require a valid bearer token on a Django Ninja endpoint.

    The validated TokenClaims are stored on ``request.auth``.

    Usage:
        @router.get("/some-path")
        @bearer_required
        def my_view(request):
            request.auth.user_id
    """
    @wraps(view_func)
    def wrapper(request: HttpRequest, *args, **kwargs):
        request.auth = authenticate_request(request)
        return view_func(request, *args, **kwargs)
    return wrapper
