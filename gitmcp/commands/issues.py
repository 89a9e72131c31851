"""Issue and pull request commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ._context import CommandContext, CommandResult

if TYPE_CHECKING:
    from ._dispatcher import CommandDispatcher


def _ref(item: dict[str, Any]) -> dict[str, Any]:
    return {"number": item.get("number"), "url": item.get("html_url") or item.get("url")}


async def cmd_create_issue(dispatcher: CommandDispatcher, ctx: CommandContext) -> CommandResult:
    p = ctx.params
    issue = await dispatcher.call_provider_object(
        "Failed to create issue",
        dispatcher.provider.create_issue(
            ctx.token, owner=p.owner, repo=p.repo, title=p.title, body=p.body, labels=p.labels,
        ),
    )
    return CommandResult("Issue created", _ref(issue))


async def cmd_create_pull_request(dispatcher: CommandDispatcher, ctx: CommandContext) -> CommandResult:
    p = ctx.params
    pr = await dispatcher.call_provider_object(
        "Failed to create pull request",
        dispatcher.provider.create_pull_request(
            ctx.token, owner=p.owner, repo=p.repo, title=p.title,
            head=p.head, base=p.base, body=p.body,
        ),
    )
    return CommandResult("Pull request created", _ref(pr))
