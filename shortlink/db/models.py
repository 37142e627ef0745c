"""
Database Models for the Short-Link Service

This module defines the SQLModel database schemas for:
- User: Account owning short links
- AuthSession: Server-side login session looked up from a cookie
- ShortLink: Maps a short code to a destination URL and its owner
- VisitRecord: One logged redirect, used for analytics

Design Decisions:
- Unique index on short_links.code: the storage layer, not application
  logic, settles concurrent creates of the same code
- visit_records.link_id carries no foreign key: history survives on its own
  and is purged together with its link by the registry
- Indexes on created_at/timestamp for time-based queries
- All timestamps are naive UTC
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlmodel import Column, Field, SQLModel


def utcnow() -> datetime:
    """Current time as naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(SQLModel, table=True):
    """Registered account. Email is stored case-folded and unique."""
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(sa_column=Column(String(254), nullable=False, unique=True, index=True))
    password_hash: str = Field(sa_column=Column(String(255), nullable=False))
    name: Optional[str] = Field(default=None, sa_column=Column(String(100), nullable=True))
    role: str = Field(default="user", sa_column=Column(String(20), nullable=False, default="user"))
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime, nullable=False)
    )


class AuthSession(SQLModel, table=True):
    """Login session. The token is what the browser holds in its cookie."""
    __tablename__ = "auth_sessions"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(
        sa_column=Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    )
    token: str = Field(sa_column=Column(String(64), nullable=False, unique=True, index=True))
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime, nullable=False)
    )
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False, index=True))


class ShortLink(SQLModel, table=True):
    """
    Main table storing short code mappings.

    Fields:
    - id: Auto-incrementing primary key
    - owner_id: User that created the link (only the owner may change it)
    - destination_url: Where the short code redirects
    - code: Unique short code (generated base62, or user-chosen)
    - title: Optional label shown in the dashboard
    - created_at: Creation time, used for newest-first listing
    - expires_at: Optional expiry; expired links redirect home

    Only title and expires_at are ever updated.
    """
    __tablename__ = "short_links"

    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: int = Field(
        sa_column=Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    )
    destination_url: str = Field(sa_column=Column(Text, nullable=False))
    code: str = Field(
        sa_column=Column(String(32), nullable=False, unique=True, index=True),
        max_length=32
    )
    title: Optional[str] = Field(default=None, sa_column=Column(String(200), nullable=True))
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime, nullable=False, index=True)
    )
    expires_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime, nullable=True)
    )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at <= (now or utcnow())


class VisitRecord(SQLModel, table=True):
    """
    Visit log table for analytics.

    Rows are append-only. browser/os/device are coarse labels derived from
    the user agent at write time; the raw user agent is kept alongside.
    """
    __tablename__ = "visit_records"

    id: Optional[int] = Field(default=None, primary_key=True)
    link_id: int = Field(sa_column=Column(Integer, nullable=False, index=True))
    visitor_ip: Optional[str] = Field(
        default=None,
        sa_column=Column(String(45), nullable=True)  # IPv6 max length
    )
    user_agent: Optional[str] = Field(
        default=None,
        sa_column=Column(String(500), nullable=True)
    )
    referrer: Optional[str] = Field(
        default=None,
        sa_column=Column(String(2048), nullable=True)
    )
    country: Optional[str] = Field(
        default=None,
        sa_column=Column(String(64), nullable=True)
    )
    browser: str = Field(sa_column=Column(String(50), nullable=False))
    os: str = Field(sa_column=Column(String(50), nullable=False))
    device: str = Field(sa_column=Column(String(50), nullable=False))
    timestamp: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime, nullable=False, index=True)
    )
