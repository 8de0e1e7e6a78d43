"""Tests for trendfeed.ingestion.reddit_adapter: Reddit hot listing."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from trendfeed.errors import AdapterError
from trendfeed.ingestion.reddit_adapter import RedditAdapter


def _make_post(post_id, title="Test Post", score=100, comments=10, stickied=False):
    return {
        "kind": "t3",
        "data": {
            "id": post_id,
            "title": title,
            "score": score,
            "num_comments": comments,
            "permalink": f"/r/test/comments/{post_id}/slug/",
            "subreddit_name_prefixed": "r/test",
            "stickied": stickied,
        },
    }


def _mock_response(payload):
    resp = MagicMock()
    resp.raise_for_status = MagicMock()
    resp.json.return_value = payload
    return resp


class TestRedditAdapter:
    def test_parses_hot_posts(self):
        payload = {"data": {"children": [_make_post("abc", "Big news", 5000, 300)]}}

        with patch(
            "trendfeed.ingestion.adapter.httpx.get", return_value=_mock_response(payload)
        ) as mock_get:
            items = RedditAdapter(subreddit="worldnews").fetch()

        assert len(items) == 1
        item = items[0]
        assert item.id == "reddit_abc"
        assert item.title == "Big news"
        assert item.url == "https://www.reddit.com/r/test/comments/abc/slug/"
        assert item.hot_score == 5000
        assert item.hot_description == "5000 upvotes, 300 comments"
        assert item.tag == "r/test"
        assert item.rank == 1
        assert "/r/worldnews/hot.json" in mock_get.call_args[0][0]

    def test_skips_stickied_and_untitled(self):
        payload = {
            "data": {
                "children": [
                    _make_post("s1", "Mod announcement", stickied=True),
                    _make_post("e1", "   "),
                    _make_post("ok", "Real post"),
                ]
            }
        }

        with patch("trendfeed.ingestion.adapter.httpx.get", return_value=_mock_response(payload)):
            items = RedditAdapter().fetch()

        assert [i.title for i in items] == ["Real post"]
        assert items[0].rank == 1

    def test_negative_score_clamped(self):
        payload = {"data": {"children": [_make_post("neg", "Downvoted", score=-12)]}}
        with patch("trendfeed.ingestion.adapter.httpx.get", return_value=_mock_response(payload)):
            items = RedditAdapter().fetch()
        assert items[0].hot_score == 0

    def test_missing_listing_raises(self):
        with patch(
            "trendfeed.ingestion.adapter.httpx.get", return_value=_mock_response({"error": 429})
        ):
            with pytest.raises(AdapterError) as exc_info:
                RedditAdapter().fetch()
        assert exc_info.value.code == "PARSE_ERROR"

    def test_invalid_json_raises(self):
        resp = MagicMock()
        resp.raise_for_status = MagicMock()
        resp.json.side_effect = ValueError("Expecting value")
        with patch("trendfeed.ingestion.adapter.httpx.get", return_value=resp):
            with pytest.raises(AdapterError, match="invalid JSON"):
                RedditAdapter().fetch()
