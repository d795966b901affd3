"""Command group: user registration and profile edits."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from skillswap.commands._base import SkillSwapGroup
from skillswap.services.profile import ProfileService

if TYPE_CHECKING:
    from skillswap.commands._context import AppContext

_USER_EXAMPLES = """\
  skillswap user register "Ada Lovelace" --teach python --teach math --learn guitar
  skillswap user show 3f0c...
  skillswap user update 3f0c... --learn guitar --learn piano
  skillswap --json user show 3f0c..."""


@click.group(cls=SkillSwapGroup, examples=_USER_EXAMPLES)
@click.pass_obj
def user(app: AppContext) -> None:
    """Register users and edit profiles."""


@user.command(
    examples="""\
  skillswap user register "Ada Lovelace" --email ada@example.com
  skillswap user register "Grace" --teach cobol --learn rust --learn go"""
)
@click.argument("name")
@click.option("--email", default=None, help="Contact email (unique).")
@click.option("--bio", default="", help="Short bio (max 200 chars).")
@click.option("--avatar-url", default=None, help="Avatar image URL.")
@click.option("--teach", multiple=True, help="Skill you can teach (repeatable).")
@click.option("--learn", multiple=True, help="Skill you want to learn (repeatable).")
@click.pass_obj
def register(
    app: AppContext,
    name: str,
    email: str | None,
    bio: str,
    avatar_url: str | None,
    teach: tuple[str, ...],
    learn: tuple[str, ...],
) -> None:
    """Register a new user profile."""
    app.emit(
        ProfileService(app.store).register(
            name,
            email=email,
            bio=bio,
            avatar_url=avatar_url,
            skills_teach=list(teach),
            skills_learn=list(learn),
        )
    )


@user.command(examples="  skillswap user show 3f0c...")
@click.argument("user_id")
@click.pass_obj
def show(app: AppContext, user_id: str) -> None:
    """Show a user profile with rating and completed swaps."""
    app.emit(ProfileService(app.store).get_profile(user_id))


@user.command(
    examples="""\
  skillswap user update 3f0c... --bio "Teaching chess on weekends"
  skillswap user update 3f0c... --teach chess --teach go"""
)
@click.argument("user_id")
@click.option("--name", default=None, help="New display name.")
@click.option("--email", default=None, help="New email.")
@click.option("--bio", default=None, help="New bio.")
@click.option("--avatar-url", default=None, help="New avatar URL.")
@click.option("--teach", multiple=True, help="Replace teach skills (repeatable).")
@click.option("--learn", multiple=True, help="Replace learn skills (repeatable).")
@click.pass_obj
def update(
    app: AppContext,
    user_id: str,
    name: str | None,
    email: str | None,
    bio: str | None,
    avatar_url: str | None,
    teach: tuple[str, ...],
    learn: tuple[str, ...],
) -> None:
    """Update profile fields. Rating and swap counts cannot be edited."""
    changes: dict[str, Any] = {}
    if name is not None:
        changes["name"] = name
    if email is not None:
        changes["email"] = email
    if bio is not None:
        changes["bio"] = bio
    if avatar_url is not None:
        changes["avatar_url"] = avatar_url
    if teach:
        changes["skills_teach"] = list(teach)
    if learn:
        changes["skills_learn"] = list(learn)

    app.emit(ProfileService(app.store).update_profile(user_id, changes=changes))
