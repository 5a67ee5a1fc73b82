"""
UI package for Squadboard.

This package contains the Flask JSON API. Rendering lives in the dashboard
front end, not here.
"""
from .web_app import create_app, run_web_app

__all__ = ["create_app", "run_web_app"]
