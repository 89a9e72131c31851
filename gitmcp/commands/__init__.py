"""Gateway command dispatcher and command implementations.

Sub-modules group commands by domain:

- ``repos``  -- repository creation and file pushes
- ``issues`` -- issues and pull requests
"""

from ._context import CommandContext, CommandResult
from ._dispatcher import CommandDispatcher

COMMANDS = CommandDispatcher.commands()

__all__ = [
    "COMMANDS",
    "CommandContext",
    "CommandDispatcher",
    "CommandResult",
]
