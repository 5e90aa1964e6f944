"""Key/value storage for restaurant configuration blobs."""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from reservation_admin.db.base import Base
from reservation_admin.models.mixins import TimestampMixin


class AdminSetting(TimestampMixin, Base):
    """One named configuration document (seat capacity, hours, closures...)."""

    __tablename__ = "admin_settings"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    setting_key: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    setting_value: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
