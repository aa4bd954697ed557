"""
Flask JSON API over a MobileAuthenticator.
"""

from .app import create_app

__all__ = ['create_app']
