"""
PromoterPro - AI insight client tests (httpx.MockTransport, no network)
"""

import json

import httpx
import pytest

from models import KPIStats
from services.insights import (
    EMPTY_INSIGHT,
    UNAVAILABLE_INSIGHT,
    build_context,
    extract_text,
    generate_performance_insight,
)

PROMOTERS = [{"id": "p1", "name": "Alice Johnson", "assignedFloors": ["Ground Floor - Main Entrance"]}]
STATS = [KPIStats(promoter_id="p1", total_kiddo=2, total_sales_leads=1)]


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestPrompt:

    def test_context_names_stats(self):
        context = json.loads(build_context(STATS, PROMOTERS, [{"id": "s1"}, {"id": "s2"}]))
        assert context["stats"][0]["name"] == "Alice Johnson"
        assert context["stats"][0]["totalKiddo"] == 2
        assert context["recentSalesCount"] == 2

    def test_extract_text_joins_parts(self):
        data = {"candidates": [{"content": {"parts": [{"text": "Hello "}, {"text": "team"}]}}]}
        assert extract_text(data) == "Hello team"
        assert extract_text({}) == ""


class TestGenerateInsight:

    @pytest.mark.asyncio
    async def test_success(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={
                "candidates": [{"content": {"parts": [{"text": "Alice leads the day."}]}}]
            })

        async with mock_client(handler) as client:
            text = await generate_performance_insight(STATS, PROMOTERS, [], api_key="k-123", client=client)

        assert text == "Alice leads the day."
        assert ":generateContent" in seen["url"]
        assert "key=k-123" in seen["url"]
        prompt = seen["body"]["contents"][0]["parts"][0]["text"]
        assert "Sales Operations Analyst for an amusement park" in prompt
        assert "max 3 paragraphs" in prompt

    @pytest.mark.asyncio
    async def test_empty_answer(self):
        async with mock_client(lambda request: httpx.Response(200, json={"candidates": []})) as client:
            text = await generate_performance_insight(STATS, PROMOTERS, [], api_key="k", client=client)
        assert text == EMPTY_INSIGHT

    @pytest.mark.asyncio
    async def test_http_error(self):
        async with mock_client(lambda request: httpx.Response(403, json={"error": "bad key"})) as client:
            text = await generate_performance_insight(STATS, PROMOTERS, [], api_key="k", client=client)
        assert text == UNAVAILABLE_INSIGHT

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        async with mock_client(handler) as client:
            text = await generate_performance_insight(STATS, PROMOTERS, [], api_key="k", client=client)
        assert text == UNAVAILABLE_INSIGHT

    @pytest.mark.asyncio
    async def test_missing_api_key_skips_call(self):
        def handler(request):
            raise AssertionError("no request expected")

        async with mock_client(handler) as client:
            text = await generate_performance_insight(STATS, PROMOTERS, [], api_key="", client=client)
        assert text == UNAVAILABLE_INSIGHT
