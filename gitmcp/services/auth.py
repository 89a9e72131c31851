"""Session authentication -- verifies a credential and upgrades the session."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from ..errors import InvalidCredential, InvalidSession
from ..state.access import AccessPolicy, FixedAccessPolicy
from ..state.session_store import Identity, SessionStore
from .github import ProviderClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    identity: Identity
    access_level: str


class SessionAuthenticator:

    def __init__(
        self,
        store: SessionStore,
        provider: ProviderClient,
        policy: AccessPolicy | None = None,
        timeout: float | None = None,
    ) -> None:
        self._store = store
        self._provider = provider
        self._policy = policy if policy is not None else FixedAccessPolicy()
        self._timeout = timeout

    async def authenticate(self, session_id: str, credential: str) -> AuthResult:
        if not session_id or self._store.get(session_id) is None:
            raise InvalidSession()
        if not credential:
            logger.warning("Authentication failed for session %s: empty credential", session_id)
            raise InvalidCredential()

        # Verification runs without any store lock held; the session may be
        # removed meanwhile, in which case store.authenticate raises.
        try:
            identity = await asyncio.wait_for(
                self._provider.verify_token(credential), timeout=self._timeout,
            )
        except Exception as exc:
            logger.error("Authentication failed for session %s: %s", session_id, exc)
            raise InvalidCredential() from exc

        self._store.authenticate(session_id, identity)
        level = self._policy.access_level(identity)
        logger.info("MCP session authenticated: %s (%s)", session_id, identity.login)
        return AuthResult(identity=identity, access_level=level)
