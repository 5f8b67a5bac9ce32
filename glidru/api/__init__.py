"""
HTTP API.
"""

from glidru.api.app import create_app

__all__ = ["create_app"]
