"""
Common mixins for business models
"""
from sqlalchemy import Column, DateTime, Uuid
from sqlalchemy.sql import func
from uuid import uuid4


class TimestampMixin:
    """Mixin for models that need timestamp tracking"""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class BaseMixin(TimestampMixin):
    """UUID primary key plus timestamps for most business models"""

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4, index=True)
