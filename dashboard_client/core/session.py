"""Session context: the stored credential and the sign-in redirect signal."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import json
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

CREDENTIAL_KEY = "token"
SIGN_IN_ROUTE = "/auth/signin"


class CredentialStore(Protocol):
    """Persistent storage for at most one bearer credential."""

    def get(self) -> str | None: ...

    def set(self, token: str) -> None: ...

    def clear(self) -> None: ...


class MemoryCredentialStore:
    """Keep the credential for the lifetime of the process."""

    def __init__(self, token: str | None = None) -> None:
        self._token = token

    def get(self) -> str | None:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileCredentialStore:
    """Keep the credential in a JSON file under the fixed ``token`` key."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except ValueError:
            logger.warning("Ignoring unreadable credential file %s", self._path)
            return {}
        return raw if isinstance(raw, dict) else {}

    def get(self) -> str | None:
        token = self._read().get(CREDENTIAL_KEY)
        return token if isinstance(token, str) and token else None

    def set(self, token: str) -> None:
        payload = self._read()
        payload[CREDENTIAL_KEY] = token
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(payload), encoding="utf-8")

    def clear(self) -> None:
        payload = self._read()
        if payload.pop(CREDENTIAL_KEY, None) is None:
            return
        self._path.write_text(json.dumps(payload), encoding="utf-8")


class RedirectSignal:
    """Navigation request the hosting application observes and acts on.

    Once raised, the signal stays pending until the host calls
    :meth:`acknowledge`; further triggers are no-ops while pending.
    """

    def __init__(self) -> None:
        self._target: str | None = None
        self._listeners: list[Callable[[str], None]] = []
        self._event = asyncio.Event()

    @property
    def pending(self) -> str | None:
        return self._target

    def subscribe(self, listener: Callable[[str], None]) -> None:
        self._listeners.append(listener)

    def trigger(self, route: str) -> bool:
        """Raise the signal; return False when a redirect is already pending."""
        if self._target is not None:
            return False
        self._target = route
        self._event.set()
        logger.info("Redirect requested to %s", route)
        for listener in list(self._listeners):
            listener(route)
        return True

    async def wait(self) -> str:
        await self._event.wait()
        return self._target or SIGN_IN_ROUTE

    def acknowledge(self) -> None:
        self._target = None
        self._event.clear()


class SessionContext:
    """Explicit session state handed to the transport at construction."""

    def __init__(
        self,
        store: CredentialStore | None = None,
        redirect: RedirectSignal | None = None,
        *,
        sign_in_route: str = SIGN_IN_ROUTE,
    ) -> None:
        self.store: CredentialStore = store or MemoryCredentialStore()
        self.redirect = redirect or RedirectSignal()
        self.sign_in_route = sign_in_route

    @property
    def credential(self) -> str | None:
        return self.store.get()

    def sign_in(self, token: str) -> None:
        """Store a fresh credential and drop any stale redirect request."""
        self.store.set(token)
        self.redirect.acknowledge()

    def sign_out(self) -> None:
        self.store.clear()

    def invalidate(self) -> bool:
        """Drop the credential and request navigation to the sign-in route."""
        self.store.clear()
        return self.redirect.trigger(self.sign_in_route)
