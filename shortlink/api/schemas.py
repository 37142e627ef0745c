"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.
Separated from endpoints to keep concerns separated and enable reuse.

Design Principles:
- Request models: Define input shape (URL validity is the registry's call,
  so destination URLs are accepted as plain strings here)
- Response models: Define output structure
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# Accounts

class RegisterRequest(BaseModel):
    """Request model for account registration."""
    email: str = Field(..., max_length=254, description="Login email")
    password: str = Field(..., min_length=8, max_length=72, description="Account password")
    name: Optional[str] = Field(default=None, max_length=100, description="Display name")


class LoginRequest(BaseModel):
    """Request model for login."""
    email: str
    password: str


class UserResponse(BaseModel):
    """Public view of a user account."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: Optional[str] = None
    role: str
    created_at: datetime


# Links

class CreateLinkRequest(BaseModel):
    """Request model for link creation."""
    url: str = Field(..., description="The destination URL to shorten")
    title: Optional[str] = Field(default=None, max_length=200, description="Dashboard label")
    expires_at: Optional[datetime] = Field(default=None, description="Optional expiry time")
    custom_code: Optional[str] = Field(default=None, description="Optional custom short code")


class UpdateLinkRequest(BaseModel):
    """Request model for link updates. Omitted fields are left unchanged."""
    title: Optional[str] = Field(default=None, max_length=200)
    expires_at: Optional[datetime] = None


class LinkResponse(BaseModel):
    """Response model for a short link."""
    id: int
    code: str
    short_url: str = Field(..., description="The complete short URL")
    destination_url: str
    title: Optional[str] = None
    created_at: datetime
    expires_at: Optional[datetime] = None


# Analytics

class BrowserCount(BaseModel):
    browser: str
    count: int


class OSCount(BaseModel):
    os: str
    count: int


class DeviceCount(BaseModel):
    device: str
    count: int


class CountryCount(BaseModel):
    country: str
    count: int


class ReferrerCount(BaseModel):
    referrer: str
    count: int


class DailyCount(BaseModel):
    date: str = Field(..., description="Day bucket, YYYY-MM-DD (UTC)")
    count: int


class AnalyticsResponse(BaseModel):
    """Response model for analytics reports."""
    total_visits: int
    unique_visitors: int
    browsers: list[BrowserCount]
    os: list[OSCount]
    devices: list[DeviceCount]
    countries: list[CountryCount]
    referrers: list[ReferrerCount]
    visits_over_time: list[DailyCount]


class DashboardResponse(BaseModel):
    """Response model for the owner dashboard."""
    total_links: int
    total_visits: int
    visits_per_link: float
    recent_links: list[LinkResponse]
    analytics: AnalyticsResponse
