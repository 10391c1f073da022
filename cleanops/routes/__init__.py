# cleanops/routes/__init__.py
"""
Application routes package
"""

from .admin_restore import register_restore_admin_routes


def init_routes(app):
    """Initialize all application routes"""
    register_restore_admin_routes(app)
