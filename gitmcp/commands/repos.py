"""Repository commands -- CREATE_REPOSITORY and PUSH_FILES."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ._context import CommandContext, CommandResult

if TYPE_CHECKING:
    from ._dispatcher import CommandDispatcher


async def cmd_create_repository(dispatcher: CommandDispatcher, ctx: CommandContext) -> CommandResult:
    p = ctx.params
    repo = await dispatcher.call_provider_object(
        "Failed to create repository",
        dispatcher.provider.create_repository(
            ctx.token, name=p.name, description=p.description, private=p.private,
        ),
    )
    return CommandResult(
        "Repository created",
        {"name": repo.get("name", p.name), "url": repo.get("html_url") or repo.get("url")},
    )


async def cmd_push_files(dispatcher: CommandDispatcher, ctx: CommandContext) -> CommandResult:
    p = ctx.params
    await dispatcher.call_provider(
        "Failed to push files",
        dispatcher.provider.push_files(
            ctx.token,
            owner=p.owner,
            repo=p.repo,
            branch=p.branch,
            files=[f.model_dump() for f in p.files],
            message=p.message,
        ),
    )
    return CommandResult("Files pushed successfully", {})
