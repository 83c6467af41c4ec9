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

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from email.utils import parsedate_to_datetime
from typing import List
from urllib.parse import quote

import requests
from bs4 import BeautifulSoup

from shared.defaults import DEFAULT_AUTHOR, PLACEHOLDER_IMAGE_URL
from shared.types import BlogPost, ListingStatus

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30  # seconds
DEFAULT_ITEM_LIMIT = 10
EXCERPT_LENGTH = 200


@dataclass
class FeedResult:
    """Posts read from the feed and whether the feed could be read at all."""

    posts: List[BlogPost] = field(default_factory=list)
    status: ListingStatus = ListingStatus.LIVE


def format_locale_date(value) -> str:
    """Renders a date the way an en-US browser would (e.g. 3/7/2026)."""
    return f"{value.month}/{value.day}/{value.year}"


def strip_html(html: str) -> str:
    """Drops tags and keeps the text between them exactly as written."""
    return BeautifulSoup(html or "", "html.parser").get_text()


def make_excerpt(text: str, length: int) -> str:
    if not text:
        return ""
    return text[:length] + "..."


def first_image_src(html: str) -> str:
    """
    Returns the src of the first <img> in an HTML fragment.

    Args:
        html (str): The HTML to search.

    Returns:
        str: The image URL, or the placeholder image when none is found.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    img = soup.find("img", src=True)
    if img is None:
        return PLACEHOLDER_IMAGE_URL
    return img["src"]


def _child_text(item: ET.Element, tag: str) -> str:
    child = item.find(tag)
    if child is None or child.text is None:
        return ""
    return child.text.strip()


def _publish_date(raw: str) -> str:
    if not raw:
        return ""
    try:
        return format_locale_date(parsedate_to_datetime(raw))
    except (TypeError, ValueError):
        return raw


def item_to_post(item: ET.Element) -> BlogPost:
    link = _child_text(item, "link")
    description = _child_text(item, "description")
    text = strip_html(description)
    return BlogPost(
        id=link,
        title=_child_text(item, "title"),
        excerpt=make_excerpt(text, EXCERPT_LENGTH),
        content=text,
        author=DEFAULT_AUTHOR,
        publish_date=_publish_date(_child_text(item, "pubDate")),
        image_url=first_image_src(description),
        tags=[],
        external_link=link,
    )


def parse_feed(xml_content: bytes, limit: int = DEFAULT_ITEM_LIMIT) -> List[BlogPost]:
    """
    Parses an RSS 2.0 document into blog posts.

    Args:
        xml_content (bytes): The raw feed document.
        limit (int): How many <item> elements to read, in feed order.

    Returns:
        list[BlogPost]: One read-only post per item.

    Raises:
        ET.ParseError: If the document is not well-formed XML.
    """
    root = ET.fromstring(xml_content)
    items = root.findall("./channel/item") or root.findall(".//item")
    return [item_to_post(item) for item in items[:limit]]


class FeedFetcher:
    """Fetches the external blog's feed through a CORS relay proxy."""

    def __init__(
        self,
        feed_url: str,
        proxy_url: str = "",
        *,
        timeout: float = REQUEST_TIMEOUT,
        limit: int = DEFAULT_ITEM_LIMIT,
    ):
        self.feed_url = feed_url
        self.proxy_url = proxy_url
        self.timeout = timeout
        self.limit = limit

    @property
    def request_url(self) -> str:
        if not self.proxy_url:
            return self.feed_url
        return self.proxy_url + quote(self.feed_url, safe="")

    def fetch(self) -> FeedResult:
        """Never raises; a failed fetch is reported as UNAVAILABLE."""
        try:
            response = requests.get(self.request_url, timeout=self.timeout)
            response.raise_for_status()
            posts = parse_feed(response.content, self.limit)
        except (requests.RequestException, ET.ParseError) as exc:
            logger.warning("Failed to fetch blog feed %s: %s", self.feed_url, exc)
            return FeedResult([], ListingStatus.UNAVAILABLE)
        if not posts:
            return FeedResult([], ListingStatus.EMPTY)
        return FeedResult(posts, ListingStatus.LIVE)
