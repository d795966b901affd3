"""Command: rate a completed-swap partner."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from skillswap.commands._base import SkillSwapCommand, acting_user_option
from skillswap.services.reputation import ReputationService

if TYPE_CHECKING:
    from skillswap.commands._context import AppContext


@click.command(
    cls=SkillSwapCommand,
    examples="""\
  skillswap rate --as 3f0c... 9a1b... 5""",
)
@acting_user_option("The rater.")
@click.argument("target_id")
@click.argument("score", type=int)
@click.pass_obj
def rate(app: AppContext, actor_id: str, target_id: str, score: int) -> None:
    """Rate TARGET_ID from 1 to 5 after a completed swap."""
    app.emit(ReputationService(app.store).submit_rating(actor_id, target_id, score))
