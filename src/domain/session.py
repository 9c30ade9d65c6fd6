"""
Session - explicit proof-of-identity handle.

Wraps the client-held session mapping (a signed cookie in the HTTP layer)
and is passed into every AccountService call that reads or changes who is
logged in.
"""

from collections.abc import MutableMapping
from typing import Any

from .models import Account

USER_ID_KEY = "user_id"


class Session:
    """Identity stored in a client-held mapping, referencing an Account by id."""

    def __init__(self, store: MutableMapping[str, Any] | None = None) -> None:
        self._store: MutableMapping[str, Any] = store if store is not None else {}

    @property
    def user_id(self) -> int | None:
        return self._store.get(USER_ID_KEY)

    @property
    def is_logged_in(self) -> bool:
        return self.user_id is not None

    def log_in(self, account: Account) -> None:
        self._store[USER_ID_KEY] = account.id

    def log_out(self) -> None:
        self._store.pop(USER_ID_KEY, None)
