# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

from enum import StrEnum
from dataclasses import dataclass, field
from typing import List, Optional


class GroupType(StrEnum):
    SUPPORT = "Support Group"
    PSYCHOEDUCATION = "Psychoeducation"
    SKILL_BUILDING = "Skill Building"


class ListingStatus(StrEnum):
    """How a list result was produced."""

    LIVE = "LIVE"
    EMPTY = "EMPTY"
    FALLBACK = "FALLBACK"
    UNAVAILABLE = "UNAVAILABLE"


@dataclass
class SiteContent:
    hero_title: str
    hero_subtitle: str
    about_text: str
    methodology_text: str
    contact_email: str
    contact_phone: str
    organization_name: str
    logo_url: str = ""
    # Non-empty text overrides the per-group calendar view.
    global_schedule_status: str = ""


@dataclass
class GroupOffering:
    id: str
    title: str
    description: str
    type: GroupType
    schedule: str
    facilitator: str
    image: str
    active: bool
    focus: str
    long_description: Optional[str] = None
    benefits: List[str] = field(default_factory=list)


@dataclass
class BlogPost:
    id: str
    title: str
    excerpt: str
    content: str
    author: str
    publish_date: str
    image_url: str
    tags: List[str] = field(default_factory=list)
    published: bool = True
    # Set for posts that live on the external blog; detail views go there.
    external_link: Optional[str] = None
