"""Subcommand modules for skillswap.

Provides register_commands() which uses deferred imports to keep
``skillswap --help`` fast as the codebase grows.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group.

    2 groups (have subcommands) + 3 standalone commands.
    """
    # --- Groups ---
    from skillswap.commands.swap import swap
    from skillswap.commands.user import user

    cli.add_command(user)
    cli.add_command(swap)

    # --- Standalone commands ---
    from skillswap.commands.feed import feed
    from skillswap.commands.init_cmd import init_cmd
    from skillswap.commands.rate import rate

    cli.add_command(init_cmd)
    cli.add_command(feed)
    cli.add_command(rate)
