"""Command: create the skillswap database."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from skillswap.commands._base import SkillSwapCommand
from skillswap.services.result import ServiceResult

if TYPE_CHECKING:
    from skillswap.commands._context import AppContext


@click.command(
    "init",
    cls=SkillSwapCommand,
    examples="""\
  skillswap init
  skillswap --db /tmp/swaps.db init""",
)
@click.pass_obj
def init_cmd(app: AppContext) -> None:
    """Create the database and tables (idempotent)."""
    store = app.store
    app.emit(
        ServiceResult(
            ok=True,
            op="init",
            data={
                "db_path": str(store.db_path),
                "config_path": str(app.settings.config_path or ""),
            },
        )
    )
