"""Columns shared by every table."""

import threading
import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func

_stamp_lock = threading.Lock()
_last_stamp = None


def new_id() -> str:
    return str(uuid.uuid4())


def creation_stamp() -> datetime:
    """
    Current UTC time, strictly increasing within the process.

    Rows flushed together still get distinct, insertion-ordered stamps,
    so ordering by ``created_at`` follows the order they were added.
    """
    global _last_stamp
    now = datetime.now(timezone.utc)
    with _stamp_lock:
        if _last_stamp is not None and now <= _last_stamp:
            now = _last_stamp + timedelta(microseconds=1)
        _last_stamp = now
    return now


class RecordMixin:
    # UUID primary key stored as text so it works on every backend
    id = Column(String(36), primary_key=True, default=new_id)

    # Audit timestamps - set per row on insert; the server default covers raw SQL
    created_at = Column(
        DateTime(timezone=True),
        default=creation_stamp,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )
