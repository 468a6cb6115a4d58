"""
Service objects that own the shop's mutable state.

Each is a plain class constructed per request (or per command) around the
database; none of them keeps state between requests.
"""
from .csrf_guard import CsrfGuard
from .roster_manager import RosterManager
from .session_store import SessionStore

__all__ = ['CsrfGuard', 'RosterManager', 'SessionStore']
