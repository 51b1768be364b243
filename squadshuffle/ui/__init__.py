"""
UI package for SquadShuffle.

This package contains the Flask JSON API server.
"""
from .web_app import create_app, run_web_app, WebAppState

__all__ = ["create_app", "run_web_app", "WebAppState"]
