"""
Permx Identity Providers

Supply the subject a permission check is made for when the caller does not
bind one explicitly.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from contextvars import ContextVar, Token
from typing import Optional

from .schemas.permission import Subject


class IdentityProvider(ABC):
    """Source of the currently acting subject."""

    @abstractmethod
    def current_subject(self) -> Optional[Subject]:
        """Return the acting subject, or None if nobody is identified."""
        pass


class StaticIdentityProvider(IdentityProvider):
    """Always returns the same subject (scripts, tests, background jobs)."""

    def __init__(self, subject: Optional[Subject] = None):
        self.subject = subject

    def current_subject(self) -> Optional[Subject]:
        return self.subject


_current_subject: ContextVar[Optional[Subject]] = ContextVar("permx_current_subject", default=None)


class ContextIdentityProvider(IdentityProvider):
    """
    Request-scoped identity backed by a context variable.

    Usage:
        identity = ContextIdentityProvider()
        token = identity.bind(subject)
        try:
            await manager.can("content.create_post")
        finally:
            identity.reset(token)
    """

    def bind(self, subject: Optional[Subject]) -> Token:
        return _current_subject.set(subject)

    def reset(self, token: Token) -> None:
        _current_subject.reset(token)

    def current_subject(self) -> Optional[Subject]:
        return _current_subject.get()
