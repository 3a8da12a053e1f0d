"""
Storage-internal fields shared by every record kind.

`pk` and `created_at` belong to the storage layer. They are never part of
an API response and never used to address a record from outside a handler.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column


class StorageFieldsMixin:
    # Why generic Uuid: native UUID on PostgreSQL, CHAR(32) on SQLite (tests)
    pk: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Storage-internal key, never exposed to clients",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this record was inserted (UTC)",
    )
