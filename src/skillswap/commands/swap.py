"""Command group: swap lifecycle (request, respond, complete)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from skillswap.commands._base import SkillSwapGroup, acting_user_option
from skillswap.domain.lifecycle import SwapAction
from skillswap.services.swap import SwapService

if TYPE_CHECKING:
    from skillswap.commands._context import AppContext

_SWAP_EXAMPLES = """\
  skillswap swap request --as 3f0c... 9a1b... --offer python --want guitar
  skillswap swap respond --as 9a1b... 77de... accept
  skillswap swap complete --as 3f0c... 77de...
  skillswap swap mine --as 3f0c...
  skillswap swap settle 77de..."""


@click.group(cls=SkillSwapGroup, examples=_SWAP_EXAMPLES)
@click.pass_obj
def swap(app: AppContext) -> None:
    """Request, respond to, and complete skill swaps."""


@swap.command(examples="  skillswap swap request --as 3f0c... 9a1b... --offer python --want guitar")
@acting_user_option("The sender.")
@click.argument("receiver_id")
@click.option("--offer", "skill_offered", required=True, help="Skill you will teach.")
@click.option("--want", "skill_requested", required=True, help="Skill you want to learn.")
@click.pass_obj
def request(
    app: AppContext,
    actor_id: str,
    receiver_id: str,
    skill_offered: str,
    skill_requested: str,
) -> None:
    """Ask RECEIVER_ID for a swap."""
    app.emit(SwapService(app.store).request(actor_id, receiver_id, skill_offered, skill_requested))


@swap.command(
    examples="""\
  skillswap swap respond --as 9a1b... 77de... accept
  skillswap swap respond --as 9a1b... 77de... reject"""
)
@acting_user_option("The receiver of the swap.")
@click.argument("swap_id")
@click.argument("action", type=click.Choice([a.value for a in SwapAction]))
@click.pass_obj
def respond(app: AppContext, actor_id: str, swap_id: str, action: str) -> None:
    """Accept or reject a pending swap (receiver only)."""
    app.emit(SwapService(app.store).respond(swap_id, actor_id, action))


@swap.command(examples="  skillswap swap complete --as 3f0c... 77de...")
@acting_user_option("Either participant.")
@click.argument("swap_id")
@click.pass_obj
def complete(app: AppContext, actor_id: str, swap_id: str) -> None:
    """Mark an active swap as completed."""
    app.emit(SwapService(app.store).complete(swap_id, actor_id))


@swap.command(examples="  skillswap swap show 77de...")
@click.argument("swap_id")
@click.pass_obj
def show(app: AppContext, swap_id: str) -> None:
    """Show a single swap."""
    app.emit(SwapService(app.store).get(swap_id))


@swap.command(examples="  skillswap swap mine --as 3f0c...")
@acting_user_option("Participant whose swaps to list.")
@click.pass_obj
def mine(app: AppContext, actor_id: str) -> None:
    """List your swaps, newest first."""
    app.emit(SwapService(app.store).list_mine(actor_id))


@swap.command(examples="  skillswap swap settle 77de...")
@click.argument("swap_id")
@click.pass_obj
def settle(app: AppContext, swap_id: str) -> None:
    """Re-apply completion credits for a completed swap (idempotent)."""
    app.emit(SwapService(app.store).settle(swap_id))
