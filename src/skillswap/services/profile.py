"""ProfileService — the profile write path.

Every skill list written here passes through the normalizer after the
size cap is checked on the raw input. ``rating`` and ``swaps_done`` are
ledger-owned and cannot be changed from here.
"""

from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy import insert, update
from sqlalchemy.exc import IntegrityError

from skillswap.domain.errors import NotFoundError, SkillSwapError, ValidationError
from skillswap.domain.ids import new_id
from skillswap.domain.skills import normalize, to_storage, validate_skill_list
from skillswap.infrastructure.database.schema import users
from skillswap.services._helpers import now_iso
from skillswap.services.base import BaseService
from skillswap.services.result import ServiceResult
from skillswap.services.telemetry import traced

logger = structlog.get_logger(__name__)

_EDITABLE_FIELDS = frozenset({"name", "email", "bio", "avatar_url", "skills_teach", "skills_learn"})
_LEDGER_FIELDS = frozenset({"rating", "swaps_done"})
_IMMUTABLE_FIELDS = frozenset({"id", "created_at"})


def _email_conflict(email: str | None) -> ValidationError:
    # email is the only user column with a unique constraint
    return ValidationError(f"Email already registered: {email}", field="email")


class ProfileService(BaseService):
    """Registers users and edits their profile fields."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @traced
    def register(
        self,
        name: str,
        *,
        email: str | None = None,
        bio: str = "",
        avatar_url: str | None = None,
        skills_teach: list[str] | None = None,
        skills_learn: list[str] | None = None,
    ) -> ServiceResult:
        """Create a user profile with zero rating and zero completed swaps."""
        op = "register_user"
        try:
            fields = self._clean(
                {
                    "name": name,
                    "email": email,
                    "bio": bio,
                    "avatar_url": avatar_url,
                    "skills_teach": skills_teach or [],
                    "skills_learn": skills_learn or [],
                }
            )
        except SkillSwapError as exc:
            return self._fail(op, exc)

        user_id = new_id()
        try:
            with self._store.transaction() as txn:
                txn.conn.execute(
                    insert(users).values(
                        id=user_id,
                        rating=0.0,
                        swaps_done=0,
                        created_at=now_iso(),
                        **fields,
                    )
                )
        except IntegrityError:
            return self._fail(op, _email_conflict(fields.get("email")))

        logger.info("profile.registered", user_id=user_id)
        return ServiceResult(ok=True, op=op, data=self._store.users.get(user_id) or {})

    @traced
    def get_profile(self, user_id: str) -> ServiceResult:
        """Fetch a user profile."""
        op = "get_profile"
        user = self._store.users.get(user_id)
        if user is None:
            return self._fail(op, NotFoundError(f"No user found with ID: {user_id}"))
        return ServiceResult(ok=True, op=op, data=user)

    @traced
    def update_profile(self, user_id: str, *, changes: dict[str, Any]) -> ServiceResult:
        """Apply profile edits. Ledger-owned and immutable fields are skipped with a warning."""
        op = "update_profile"
        warnings: list[str] = []

        editable: dict[str, Any] = {}
        for key, value in changes.items():
            if key in _LEDGER_FIELDS:
                warnings.append(f"Cannot change ledger-owned field: {key}")
            elif key in _IMMUTABLE_FIELDS:
                warnings.append(f"Cannot change immutable field: {key}")
            elif key not in _EDITABLE_FIELDS:
                warnings.append(f"Unknown profile field ignored: {key}")
            else:
                editable[key] = value

        try:
            if not self._store.users.exists(user_id):
                raise NotFoundError(f"No user found with ID: {user_id}", user_id=user_id)
            if not editable:
                raise ValidationError("No changes submitted")
            fields = self._clean(editable, user_id=user_id)
        except SkillSwapError as exc:
            return self._fail(op, exc)

        try:
            with self._store.transaction() as txn:
                txn.conn.execute(update(users).where(users.c.id == user_id).values(**fields))
        except IntegrityError:
            return self._fail(op, _email_conflict(fields.get("email")))

        logger.info("profile.updated", user_id=user_id, fields=sorted(fields))
        return ServiceResult(
            ok=True,
            op=op,
            data={**(self._store.users.get(user_id) or {}), "fields_changed": sorted(fields)},
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _clean(self, raw: dict[str, Any], *, user_id: str | None = None) -> dict[str, Any]:
        """Validate and normalize the given profile fields into column values."""
        cfg = self._store.settings
        fields: dict[str, Any] = {}

        if "name" in raw:
            name = (raw["name"] or "").strip()
            if len(name) < cfg.profile.name_min_length:
                raise ValidationError(
                    f"Name must be at least {cfg.profile.name_min_length} characters",
                    field="name",
                )
            fields["name"] = name

        if "email" in raw:
            email = (raw["email"] or "").strip().lower() or None
            if email is not None:
                if "@" not in email:
                    raise ValidationError(f"Invalid email: {email!r}", field="email")
                if self._store.users.email_taken(email, exclude_id=user_id):
                    raise _email_conflict(email)
            fields["email"] = email

        if "bio" in raw:
            bio = raw["bio"] or ""
            if len(bio) > cfg.profile.bio_max_length:
                raise ValidationError(
                    f"Bio must be at most {cfg.profile.bio_max_length} characters",
                    field="bio",
                )
            fields["bio"] = bio

        if "avatar_url" in raw:
            fields["avatar_url"] = (raw["avatar_url"] or "").strip() or None

        for key in ("skills_teach", "skills_learn"):
            if key in raw:
                skills = validate_skill_list(raw[key], max_entries=cfg.skills.max_entries)
                fields[key] = to_storage(normalize(skills))

        return fields
