"""Decorators for the auth blueprint."""

from functools import wraps

from flask import session

from tourneyhub.errors import UnauthorizedError


def login_required(f):
    """Reject the request unless a user is logged in.

    Usage:
    @login_required
    def protected_view():
        ...
    """

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if "user_id" not in session:
            raise UnauthorizedError()
        return f(*args, **kwargs)

    return decorated_function
