"""Gateway command dispatcher.

Turns ``(session_id, command, parameters)`` into one provider call under
session-authorization checks. The registry is closed: adding a command
means adding an entry to ``_COMMANDS`` and a handler.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ..errors import InvalidParameters, InvalidSession, NotAuthorized, ProviderError, UnknownCommand
from ..services.github import ProviderClient
from ..state.session_store import SessionStore
from . import issues as _issue_cmds
from . import repos as _repo_cmds
from ._context import CommandContext, CommandResult
from .params import (
    CreateIssueParams,
    CreatePullRequestParams,
    CreateRepositoryParams,
    PushFilesParams,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CommandDispatcher:
    _COMMANDS: dict[str, tuple[str, type[BaseModel]]] = {
        "CREATE_REPOSITORY": ("_cmd_create_repository", CreateRepositoryParams),
        "PUSH_FILES": ("_cmd_push_files", PushFilesParams),
        "CREATE_ISSUE": ("_cmd_create_issue", CreateIssueParams),
        "CREATE_PULL_REQUEST": ("_cmd_create_pull_request", CreatePullRequestParams),
    }

    def __init__(
        self,
        store: SessionStore,
        provider: ProviderClient,
        timeout: float | None = None,
    ) -> None:
        self._store = store
        self._provider = provider
        self._timeout = timeout

    @property
    def provider(self) -> ProviderClient:
        return self._provider

    @classmethod
    def commands(cls) -> frozenset[str]:
        return frozenset(cls._COMMANDS)

    async def dispatch(
        self, session_id: str, command: str, parameters: Any = None,
    ) -> CommandResult:
        session = self._store.get(session_id) if session_id else None
        if session is None:
            raise InvalidSession()
        if not session.authenticated or session.identity is None:
            raise NotAuthorized()

        entry = self._COMMANDS.get(command) if isinstance(command, str) else None
        if entry is None:
            logger.warning("Unknown command from session %s: %r", session_id, command)
            raise UnknownCommand(str(command))
        handler_name, params_type = entry

        params = _validate(command, params_type, parameters)
        logger.info("MCP command received: %s (session=%s)", command, session_id)

        ctx = CommandContext(session=session, command=command, params=params)
        result: CommandResult = await getattr(self, handler_name)(ctx)
        # touch() is a no-op for a session removed mid-command.
        self._store.touch(session_id)
        return result

    async def call_provider(self, failure: str, call: Awaitable[T]) -> T:
        """Await a provider call, mapping every failure to :class:`ProviderError`."""
        try:
            return await asyncio.wait_for(call, timeout=self._timeout)
        except TimeoutError as exc:
            logger.error("%s: timed out after %ss", failure, self._timeout)
            raise ProviderError(failure, detail=f"Provider call timed out after {self._timeout}s") from exc
        except Exception as exc:
            logger.error("%s: %s", failure, exc)
            raise ProviderError(failure, detail=str(exc) or type(exc).__name__) from exc

    async def call_provider_object(
        self, failure: str, call: Awaitable[Any],
    ) -> dict[str, Any]:
        """Like :meth:`call_provider`, but the result must be a JSON object."""
        data = await self.call_provider(failure, call)
        if not isinstance(data, dict):
            logger.error("%s: unexpected provider response %r", failure, type(data).__name__)
            raise ProviderError(failure, detail="Unexpected provider response")
        return data

    # -- Repository commands (delegated to commands.repos) -----------------

    async def _cmd_create_repository(self, ctx: CommandContext) -> CommandResult:
        return await _repo_cmds.cmd_create_repository(self, ctx)

    async def _cmd_push_files(self, ctx: CommandContext) -> CommandResult:
        return await _repo_cmds.cmd_push_files(self, ctx)

    # -- Issue & pull request commands (delegated to commands.issues) ------

    async def _cmd_create_issue(self, ctx: CommandContext) -> CommandResult:
        return await _issue_cmds.cmd_create_issue(self, ctx)

    async def _cmd_create_pull_request(self, ctx: CommandContext) -> CommandResult:
        return await _issue_cmds.cmd_create_pull_request(self, ctx)


def _validate(command: str, params_type: type[BaseModel], parameters: Any) -> BaseModel:
    try:
        return params_type.model_validate(parameters if parameters is not None else {})
    except ValidationError as exc:
        problems = [
            f"{'.'.join(str(p) for p in err['loc']) or 'parameters'}: {err['msg']}"
            for err in exc.errors()
        ]
        raise InvalidParameters(command, problems) from exc
