"""Tests for request metadata extraction."""

import pytest
from starlette.requests import Request

from shortlink.api.dependencies import get_request_context
from shortlink.core.request_info import get_client_ip
from shortlink.services.link_registry import LinkRegistry
from shortlink.services.stats_service import StatsService
from shortlink.services.visit_logger import VisitRecorder


def make_request(headers=None, client=("198.51.100.4", 51234)):
    raw_headers = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in (headers or {}).items()
    ]
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw_headers, "client": client})


class TestGetClientIP:
    def test_socket_peer(self):
        assert get_client_ip(make_request()) == "198.51.100.4"

    def test_first_forwarded_for_entry_wins(self):
        request = make_request({"X-Forwarded-For": "203.0.113.9, 10.0.0.1"})
        assert get_client_ip(request) == "203.0.113.9"

    def test_no_peer_is_none(self):
        assert get_client_ip(make_request(client=None)) is None


class TestRequestContext:
    def test_context_from_headers(self):
        request = make_request({
            "User-Agent": "Mozilla/5.0 Firefox/121.0",
            "Referer": "https://news.example.org/",
            "CF-IPCountry": "SE",
        })
        context = get_request_context(request)

        assert context.visitor_ip == "198.51.100.4"
        assert context.user_agent == "Mozilla/5.0 Firefox/121.0"
        assert context.referrer == "https://news.example.org/"
        assert context.country == "SE"

    @pytest.mark.asyncio
    async def test_visits_without_address_are_not_unique_visitors(self, session, owner):
        link = await LinkRegistry(session).create("https://example.com", owner_id=owner.id)
        recorder = VisitRecorder(session)
        for _ in range(2):
            await recorder.record(link.id, get_request_context(make_request(client=None)))
        await recorder.record(link.id, get_request_context(make_request()))

        report = await StatsService(session).get_link_analytics(link.id)

        assert report["total_visits"] == 3
        assert report["unique_visitors"] == 1
