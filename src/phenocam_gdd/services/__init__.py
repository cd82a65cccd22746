"""Shared service utilities (HTTP session with retry)."""

from phenocam_gdd.services.http import create_session, session

__all__ = ["create_session", "session"]
