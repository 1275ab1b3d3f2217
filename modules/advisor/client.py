"""
Maintenance advice from the Gemini ``generateContent`` REST endpoint.

The advisor never raises: every failure (no API key, network, HTTP status,
unexpected response shape) is logged and answered with a fixed apology.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

import httpx

from modules.parts.health import PartHealth
from modules.parts.models import Part

log = logging.getLogger("partlife.advisor")

APOLOGY = "Sorry, I encountered an error communicating with the maintenance AI."
EMPTY_ANSWER = "I couldn't generate a response at this time."
SYSTEM_INSTRUCTION = "You are a helpful maintenance assistant. Be concise and professional."


@dataclass(frozen=True)
class Advice:
    text: str
    ok: bool

    def to_dict(self) -> dict:
        return {"ok": self.ok, "text": self.text}


def describe_inventory(parts: Iterable[Part], health: Mapping[str, PartHealth]) -> str:
    """One block per part: machine, name, install date, lifespan and wear."""
    lines = []
    for p in parts:
        h = health[p.id]
        lines.append(
            f"- Machine: {p.machine_id} | Part: {p.name} ({p.category})\n"
            f"  Installed: {p.install_date.date().isoformat()}\n"
            f"  Lifespan: {p.lifespan_days} days\n"
            f"  Status: {h.percentage_used:.1f}% used ({h.status.value})\n"
            f"  Days Remaining: {h.days_remaining}"
        )
    return "\n".join(lines)


def build_prompt(parts: Iterable[Part], health: Mapping[str, PartHealth], query: str) -> str:
    return (
        "You are an expert industrial and mechanical maintenance advisor.\n"
        "Here is the current status of the parts in the system:\n\n"
        f"{describe_inventory(parts, health)}\n\n"
        f'User Query: "{query}"\n\n'
        "Based on the data above, provide a concise, helpful response.\n"
        'If the user asks for a summary, prioritize mentioning "Critical" or "Warning" parts.\n'
        "If the user asks about a specific part, look up its details in the list above.\n"
        "If the user asks about a specific Machine ID (e.g. M-01), focus on parts for that machine.\n"
        "Keep advice practical."
    )


def extract_text(data: dict) -> str:
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    content = candidates[0].get("content") or {}
    return "".join(part.get("text", "") for part in content.get("parts") or [])


class GeminiAdvisor:
    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_config(cls, config: Mapping) -> "GeminiAdvisor":
        return cls(
            api_key=config.get("GEMINI_API_KEY", ""),
            model=config.get("ADVISOR_MODEL", "gemini-2.5-flash"),
            base_url=config.get("ADVISOR_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"),
            timeout=float(config.get("ADVISOR_TIMEOUT", 30)),
            transport=config.get("ADVISOR_TRANSPORT"),
        )

    def _request_body(self, prompt: str) -> dict:
        return {
            "systemInstruction": {"parts": [{"text": SYSTEM_INSTRUCTION}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        }

    def advise(self, parts: list[Part], health: Mapping[str, PartHealth], query: str) -> Advice:
        if not self.api_key:
            log.error("Gemini API key is not configured")
            return Advice(APOLOGY, ok=False)

        url = f"{self.base_url}/models/{self.model}:generateContent"
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                resp = client.post(
                    url,
                    params={"key": self.api_key},
                    json=self._request_body(build_prompt(parts, health, query)),
                )
                resp.raise_for_status()
                text = extract_text(resp.json())
        except Exception as e:
            log.exception(f"Gemini API error: {e}")
            return Advice(APOLOGY, ok=False)

        if not text.strip():
            return Advice(EMPTY_ANSWER, ok=True)
        return Advice(text, ok=True)
