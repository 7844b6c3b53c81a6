"""
Token usage tracker for completion calls.

Records the usage the provider reports on each response, in memory only,
with a rough cost estimate from a static pricing table.
"""

import threading
import time
from dataclasses import dataclass

# Pricing per 1M tokens
PRICING = {
    "gpt-3.5-turbo": {"input": 0.50, "output": 1.50},
    "gpt-4o-mini": {"input": 0.15, "output": 0.60},
    "gpt-4o": {"input": 2.50, "output": 10.00},
    "gpt-4-turbo": {"input": 10.00, "output": 30.00},
}


def _pricing_for(model: str) -> dict:
    if model in PRICING:
        return PRICING[model]
    # Dated snapshots ("gpt-3.5-turbo-0125") share the base model's price
    for name in sorted(PRICING, key=len, reverse=True):
        if model.startswith(name):
            return PRICING[name]
    return {"input": 0.0, "output": 0.0}


@dataclass
class APICall:
    timestamp: float
    model: str
    purpose: str  # "chat", "probe"
    input_tokens: int
    output_tokens: int
    total_tokens: int
    cost_usd: float


class TokenTracker:
    def __init__(self):
        self._calls: list[APICall] = []
        self._lock = threading.Lock()

    def log(
        self,
        model: str,
        purpose: str,
        input_tokens: int,
        output_tokens: int = 0,
        total_tokens: int | None = None,
    ) -> APICall:
        pricing = _pricing_for(model)
        cost = (input_tokens * pricing["input"] + output_tokens * pricing["output"]) / 1_000_000

        call = APICall(
            timestamp=time.time(),
            model=model,
            purpose=purpose,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            total_tokens=total_tokens if total_tokens is not None else input_tokens + output_tokens,
            cost_usd=cost,
        )
        with self._lock:
            self._calls.append(call)
        return call

    @property
    def calls(self) -> list[APICall]:
        with self._lock:
            return list(self._calls)

    def summary(self) -> dict:
        return _summarize(self.calls)

    def reset(self):
        with self._lock:
            self._calls.clear()


def _summarize(calls: list[APICall]) -> dict:
    by_purpose: dict[str, dict] = {}
    for call in calls:
        if call.purpose not in by_purpose:
            by_purpose[call.purpose] = {
                "count": 0, "input_tokens": 0, "output_tokens": 0,
                "total_tokens": 0, "cost_usd": 0.0,
            }
        s = by_purpose[call.purpose]
        s["count"] += 1
        s["input_tokens"] += call.input_tokens
        s["output_tokens"] += call.output_tokens
        s["total_tokens"] += call.total_tokens
        s["cost_usd"] += call.cost_usd

    total_cost = sum(s["cost_usd"] for s in by_purpose.values())
    total_calls = sum(s["count"] for s in by_purpose.values())
    total_tokens = sum(s["total_tokens"] for s in by_purpose.values())
    return {
        "by_purpose": by_purpose,
        "total_calls": total_calls,
        "total_tokens": total_tokens,
        "total_cost_usd": total_cost,
    }


# Module-level convenience
tracker = TokenTracker()
