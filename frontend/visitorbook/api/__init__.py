# API package init
"""
VisitorBook Frontend: API Package
===================================

Exports the HTTP client used by every hook.
"""

from visitorbook.api.client import ApiClient

__all__ = ["ApiClient"]
