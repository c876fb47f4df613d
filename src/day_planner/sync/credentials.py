# src/day_planner/sync/credentials.py

from __future__ import annotations

import logging

from ..core.ports import KeyValueRepo
from ..storage.persistence import DOCUMENT_ID_KEY, TOKEN_KEY
from .errors import CredentialNotSetError, InvalidCredentialError

logger = logging.getLogger(__name__)

TOKEN_PREFIXES = ("ghp_", "github_pat_")


def looks_like_token(value: str) -> bool:
    """Client-side sanity check only; the server is the real judge."""
    return value.startswith(TOKEN_PREFIXES)


class CredentialStore:
    """Bearer token and cached backup document id, kept in local slots."""

    def __init__(self, kv: KeyValueRepo) -> None:
        self._kv = kv

    @property
    def token(self) -> str | None:
        return self._kv.get(TOKEN_KEY) or None

    def has_token(self) -> bool:
        return bool(self.token)

    def require_token(self) -> str:
        token = self.token
        if not token:
            raise CredentialNotSetError()
        return token

    def set_token(self, token: str) -> None:
        token = (token or "").strip()
        if not token:
            raise InvalidCredentialError("Please enter a valid GitHub token")
        if not looks_like_token(token):
            raise InvalidCredentialError('Token should start with "ghp_" or "github_pat_"')
        self._kv.set(TOKEN_KEY, token)
        logger.info("GitHub token saved.")

    def clear(self) -> None:
        """Forget the token and the document id that was found with it."""
        self._kv.delete(TOKEN_KEY, DOCUMENT_ID_KEY)
        logger.info("GitHub token cleared.")

    @property
    def document_id(self) -> str | None:
        return self._kv.get(DOCUMENT_ID_KEY) or None

    @document_id.setter
    def document_id(self, value: str | None) -> None:
        if value:
            self._kv.set(DOCUMENT_ID_KEY, value)
        else:
            self._kv.delete(DOCUMENT_ID_KEY)
