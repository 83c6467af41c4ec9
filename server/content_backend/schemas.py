"""
Pydantic schemas for the content service API. Attributes are snake_case;
they are read and written as camelCase on the wire to match what the
site's pages consume.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from shared.types import GroupType, ListingStatus


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SiteContentModel(ApiModel):
    hero_title: str = ""
    hero_subtitle: str = ""
    about_text: str = ""
    methodology_text: str = ""
    contact_email: str = ""
    contact_phone: str = ""
    organization_name: str = ""
    logo_url: str = ""
    global_schedule_status: str = ""


class GroupOfferingModel(ApiModel):
    id: str = Field(..., min_length=1)
    title: str = ""
    description: str = ""
    long_description: Optional[str] = None
    benefits: list[str] = Field(default_factory=list)
    type: GroupType = GroupType.SUPPORT
    schedule: str = ""
    facilitator: str = ""
    image: str = ""
    active: bool = False
    focus: str = ""


class GroupListResponse(ApiModel):
    groups: list[GroupOfferingModel]
    status: ListingStatus


class BlogPostModel(ApiModel):
    id: str = Field(..., min_length=1)
    title: str = ""
    excerpt: str = ""
    content: str = ""
    author: str = ""
    publish_date: str = ""
    image_url: str = ""
    tags: list[str] = Field(default_factory=list)
    published: bool = True
    external_link: Optional[str] = None


class BlogListResponse(ApiModel):
    posts: list[BlogPostModel]
    status: ListingStatus
    external_blog_url: str
    read_only: bool


class DashboardStatsResponse(ApiModel):
    active_groups: int
    posts: int


class LoginRequest(ApiModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1)


class SessionResponse(ApiModel):
    access_token: str
    user_id: str
    email: str
    is_admin: bool


class PasswordResetRequest(ApiModel):
    email: str = Field(..., min_length=3, max_length=320)


class RecoveryRequest(ApiModel):
    token: str = Field(..., min_length=1)


class PasswordUpdateRequest(ApiModel):
    password: str


class StatusResponse(ApiModel):
    status: Literal["ok"]
