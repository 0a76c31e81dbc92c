"""Column defaults shared by the CrushConfessions models.

Primary keys are random UUID strings and every stored timestamp is UTC with
an explicit offset.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Current time as an aware UTC datetime, used for ``created_at``-style columns."""
    return datetime.now(UTC)
