"""ID generation and validation.

Users and swaps both use random UUID4 strings.

INVARIANT: IDs are permanent. Once generated, an ID never changes.
"""

from __future__ import annotations

import re
import uuid

ID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")


def new_id() -> str:
    """Generate a fresh UUID4 identifier."""
    return str(uuid.uuid4())


def validate_id(value: object) -> bool:
    """Check whether *value* looks like an ID produced by :func:`new_id`."""
    return isinstance(value, str) and ID_PATTERN.match(value) is not None
