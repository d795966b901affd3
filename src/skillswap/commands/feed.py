"""Command: overlap-ranked user feed and matches."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from skillswap.commands._base import SkillSwapCommand, acting_user_option
from skillswap.services.feed import FeedService

if TYPE_CHECKING:
    from skillswap.commands._context import AppContext


@click.command(
    cls=SkillSwapCommand,
    examples="""\
  skillswap feed --as 3f0c...
  skillswap feed --as 3f0c... --matches
  skillswap --json feed --as 3f0c... --limit 5""",
)
@acting_user_option("Viewer whose learn list drives the ranking.")
@click.option("--matches", is_flag=True, help="Only users teaching something you want to learn.")
@click.option("--limit", default=None, type=click.IntRange(min=0), help="Max results (0 = all).")
@click.pass_obj
def feed(app: AppContext, actor_id: str, matches: bool, limit: int | None) -> None:
    """List other users ranked by skill overlap, then rating."""
    svc = FeedService(app.store)
    if matches:
        app.emit(svc.list_matches(actor_id, limit=limit))
    else:
        app.emit(svc.list_feed(actor_id, limit=limit))
