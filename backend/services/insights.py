"""
PromoterPro - AI performance insight

Sends the day's KPIs to the Gemini generateContent endpoint and returns the
model's short written summary for the Team Lead. Failures never raise: the
caller always gets displayable text back.
"""

import json
import logging
from typing import Any, Dict, List, Optional

import httpx

import config
from models import KPIStats

logger = logging.getLogger("insights")

EMPTY_INSIGHT = "Unable to generate insights at this time."
UNAVAILABLE_INSIGHT = "AI Insight service is currently unavailable. Please check API Key configuration."


def build_context(stats: List[KPIStats], promoters: List[Dict[str, Any]], sales: List[Dict[str, Any]]) -> str:
    names = {p.get("id"): p.get("name") for p in promoters}
    return json.dumps({
        "promoters": promoters,
        "stats": [
            {"name": names.get(s.promoter_id), **s.model_dump(by_alias=True)}
            for s in stats
        ],
        "recentSalesCount": len(sales),
    })


def build_prompt(context: str) -> str:
    return (
        "As a Sales Operations Analyst for an amusement park, analyze the following daily performance data.\n"
        f"Data: {context}\n\n"
        "Please provide a brief, professional summary (max 3 paragraphs) including:\n"
        "1. Top performing promoter and their key strength.\n"
        "2. Which floor/location seems to have the lowest traction.\n"
        "3. A strategic recommendation for the Team Lead to improve sales tomorrow.\n\n"
        "Keep the tone encouraging but analytical."
    )


def extract_text(data: Dict[str, Any]) -> str:
    """Concatenate the text parts of the first candidate"""
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(part.get("text", "") for part in parts)


async def generate_performance_insight(
    stats: List[KPIStats],
    promoters: List[Dict[str, Any]],
    sales: List[Dict[str, Any]],
    api_key: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    api_key = api_key if api_key is not None else config.GEMINI_API_KEY
    if not api_key:
        logger.warning("[INSIGHT] GEMINI_API_KEY non configurée")
        return UNAVAILABLE_INSIGHT

    url = f"{config.GEMINI_API_URL}/{config.GEMINI_MODEL}:generateContent"
    payload = {
        "contents": [
            {"parts": [{"text": build_prompt(build_context(stats, promoters, sales))}]}
        ]
    }

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=30.0) as http:
                resp = await http.post(url, params={"key": api_key}, json=payload)
        else:
            resp = await client.post(url, params={"key": api_key}, json=payload)

        resp.raise_for_status()
        text = extract_text(resp.json())
        logger.info(f"[INSIGHT] Insight généré ({len(text)} caractères)")
        return text or EMPTY_INSIGHT

    except httpx.TimeoutException as e:
        logger.warning(f"[INSIGHT] Timeout Gemini: {str(e)}")
    except httpx.HTTPStatusError as e:
        logger.error(f"[INSIGHT] Gemini HTTP {e.response.status_code}")
    except Exception as e:
        logger.error(f"[INSIGHT] Gemini API Error: {str(e)}")

    return UNAVAILABLE_INSIGHT
