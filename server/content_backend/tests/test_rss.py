import unittest
from unittest.mock import MagicMock, patch

import requests

from content_backend import rss
from content_backend.rss import FeedFetcher, parse_feed
from shared.defaults import PLACEHOLDER_IMAGE_URL
from shared.types import ListingStatus


def _feed(*items: str) -> bytes:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0"><channel><title>Reflective Insights</title>'
        + "".join(items)
        + "</channel></rss>"
    ).encode("utf-8")


def _item(link: str, description: str = "", title: str = "Post", pub_date: str = "") -> str:
    return (
        f"<item><title>{title}</title><link>{link}</link>"
        f"<pubDate>{pub_date}</pubDate>"
        f"<description><![CDATA[{description}]]></description></item>"
    )


class ParseFeedTests(unittest.TestCase):
    def test_image_is_first_img_src(self):
        posts = parse_feed(
            _feed(
                _item(
                    "https://blog.example.org/a",
                    '<p>Hello</p><img src="https://x/y.jpg"><img src="https://x/z.jpg">',
                )
            )
        )
        self.assertEqual(len(posts), 1)
        self.assertEqual(posts[0].image_url, "https://x/y.jpg")

    def test_missing_image_uses_placeholder(self):
        posts = parse_feed(_feed(_item("https://blog.example.org/a", "<p>No pictures</p>")))
        self.assertEqual(posts[0].image_url, PLACEHOLDER_IMAGE_URL)

    def test_link_is_id_and_external_target(self):
        post = parse_feed(_feed(_item("https://blog.example.org/a", "text")))[0]
        self.assertEqual(post.id, "https://blog.example.org/a")
        self.assertEqual(post.external_link, "https://blog.example.org/a")
        self.assertEqual(post.tags, [])

    def test_excerpt_strips_tags_and_truncates_to_200(self):
        body = "<p>" + ("word " * 100) + "</p>"
        post = parse_feed(_feed(_item("https://blog.example.org/a", body)))[0]
        self.assertNotIn("<p>", post.excerpt)
        self.assertTrue(post.excerpt.endswith("..."))
        self.assertEqual(len(post.excerpt), 203)

    def test_tag_stripping_keeps_text_untouched(self):
        post = parse_feed(
            _feed(_item("https://blog.example.org/a", "<p>Hello</p><p>world  again</p>"))
        )[0]
        self.assertEqual(post.content, "Helloworld  again")
        self.assertEqual(post.excerpt, "Helloworld  again...")

    def test_escaped_html_description(self):
        item = (
            "<item><title>T</title><link>https://blog.example.org/b</link>"
            "<description>&lt;p&gt;Short &lt;b&gt;note&lt;/b&gt;&lt;/p&gt;"
            '&lt;img src="https://x/escaped.png"&gt;</description></item>'
        )
        post = parse_feed(_feed(item))[0]
        self.assertEqual(post.excerpt, "Short note...")
        self.assertEqual(post.image_url, "https://x/escaped.png")

    def test_pub_date_is_rendered_as_locale_date(self):
        post = parse_feed(
            _feed(_item("https://blog.example.org/a", "x", pub_date="Fri, 07 Mar 2025 10:00:00 +0000"))
        )[0]
        self.assertEqual(post.publish_date, "3/7/2025")

    def test_only_first_ten_items(self):
        items = [_item(f"https://blog.example.org/{i}", "x") for i in range(12)]
        posts = parse_feed(_feed(*items))
        self.assertEqual([p.id for p in posts], [f"https://blog.example.org/{i}" for i in range(10)])


class FeedFetcherTests(unittest.TestCase):
    def setUp(self):
        self.fetcher = FeedFetcher(
            "https://blog.example.org/feeds/posts/default?alt=rss",
            "https://proxy.example.org/raw?url=",
            timeout=5,
        )

    def test_request_goes_through_proxy(self):
        self.assertEqual(
            self.fetcher.request_url,
            "https://proxy.example.org/raw?url="
            "https%3A%2F%2Fblog.example.org%2Ffeeds%2Fposts%2Fdefault%3Falt%3Drss",
        )

    @patch.object(rss.requests, "get")
    def test_live_feed(self, mock_get):
        mock_get.return_value = MagicMock(content=_feed(_item("https://blog.example.org/a", "x")))
        result = self.fetcher.fetch()
        self.assertEqual(result.status, ListingStatus.LIVE)
        self.assertEqual(len(result.posts), 1)
        mock_get.assert_called_once_with(self.fetcher.request_url, timeout=5)

    @patch.object(rss.requests, "get")
    def test_empty_feed(self, mock_get):
        mock_get.return_value = MagicMock(content=_feed())
        result = self.fetcher.fetch()
        self.assertEqual(result.status, ListingStatus.EMPTY)
        self.assertEqual(result.posts, [])

    @patch.object(rss.requests, "get")
    def test_network_failure_is_unavailable(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("proxy down")
        result = self.fetcher.fetch()
        self.assertEqual(result.status, ListingStatus.UNAVAILABLE)
        self.assertEqual(result.posts, [])

    @patch.object(rss.requests, "get")
    def test_malformed_feed_is_unavailable(self, mock_get):
        mock_get.return_value = MagicMock(content=b"<html>not a feed")
        self.assertEqual(self.fetcher.fetch().status, ListingStatus.UNAVAILABLE)


if __name__ == "__main__":
    unittest.main()
