"""SQLAlchemy models for persisted notifications and their delivery attempts."""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.sql import expression
from sqlalchemy.orm import relationship

from legal_crm.infrastructure.database import Base
from legal_crm.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_user_read_created", "user_id", "read", "created_at"),
        Index("ix_notification_user_type", "user_id", "type"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    type = Column(String(50), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    priority = Column(String(10), nullable=False, default="medium")
    read = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    read_at = Column(DateTime(), nullable=True)
    action_url = Column(String(500), nullable=True)
    action_text = Column(String(120), nullable=True)
    # ``metadata`` is reserved on declarative classes.
    extra_data = Column("metadata", JSON, nullable=False, default=dict)
    related_model = Column(String(30), nullable=True)
    related_id = Column(Integer, nullable=True)
    expires_at = Column(DateTime(), nullable=True, index=True)
    channels = Column(JSON, nullable=False, default=lambda: ["in-app"])
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(
        DateTime(),
        nullable=False,
        default=now_in_app_naive_datetime,
        onupdate=now_in_app_naive_datetime,
    )

    attempts = relationship(
        "NotificationDeliveryAttemptModel",
        back_populates="notification",
        order_by="NotificationDeliveryAttemptModel.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )


class NotificationDeliveryAttemptModel(Base):
    """One row per channel attempt; rows are only ever inserted."""

    __tablename__ = "notification_delivery_attempt"

    id = Column(Integer, primary_key=True, index=True)
    notification_id = Column(
        Integer,
        ForeignKey("notification.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    channel = Column(String(20), nullable=False)
    sent_at = Column(DateTime(), nullable=False)
    status = Column(String(10), nullable=False)
    error = Column(String(1000), nullable=True)

    notification = relationship("NotificationModel", back_populates="attempts")


__all__ = ["NotificationModel", "NotificationDeliveryAttemptModel"]
