"""
UI package for the Courtside basketball bench tracker.

This package contains the Flask server the bench UI talks to.
"""
from .web_app import create_app, run_web_app

__all__ = ["create_app", "run_web_app"]
