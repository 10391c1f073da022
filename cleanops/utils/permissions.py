# cleanops/utils/permissions.py

from functools import wraps
from http import HTTPStatus

from flask import current_app, jsonify
from flask_login import current_user


def has_role(user, *roles):
    """Check whether an authenticated user holds one of ``roles``"""
    if not user or not user.is_authenticated:
        return False
    return getattr(user, "role", None) in roles


def role_required(*roles):
    """
    Decorator to require one of the given roles on a JSON endpoint.

    Anonymous callers get 401 and authenticated callers without a matching
    role get 403, both as JSON bodies.
    """

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                return jsonify({"success": False, "error": "Authentication required"}), HTTPStatus.UNAUTHORIZED

            if not has_role(current_user, *roles):
                current_app.logger.warning(
                    "User %s denied access to %s (role=%s)",
                    current_user.id,
                    f.__name__,
                    getattr(current_user.role, "value", current_user.role),
                )
                return (
                    jsonify({"success": False, "error": "Insufficient permissions"}),
                    HTTPStatus.FORBIDDEN,
                )

            return f(*args, **kwargs)

        return decorated_function

    return decorator
