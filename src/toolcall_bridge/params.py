"""
Parameter normalization for toolcall-bridge.

Public API
- Users pass a dict as `params` to `ToolCallLoop` or `BaseAsyncLLM.send`.

Contract
- Standard keys work across providers:
  temperature: float
  max_tokens: int
  top_p: float
  stop: str | list[str]
  seed: int
  tool_choice: str | dict
  parallel_tool_calls: bool

- Provider specific keys go under `extra` and pass through unchanged.
  Examples:
    extra.num_ctx: 8192          (Ollama option)
    extra.keep_alive: "5m"       (Ollama request field)
    extra.reasoning_effort: "low"

Unknown top-level keys are moved into extra.
Tools are never passed here; the loop hands declarations to the adapter.
"""

from __future__ import annotations

from typing import Any

STANDARD_KEYS = frozenset(
    {
        "temperature",
        "max_tokens",
        "top_p",
        "stop",
        "seed",
        "tool_choice",
        "parallel_tool_calls",
        "frequency_penalty",
        "presence_penalty",
    }
)


def normalize_params(params: dict[str, Any] | None) -> dict[str, Any]:
    """
    Normalize a user-supplied params dict to a single internal shape.

    Returns a dict with only standard keys plus an `extra` dict.
    Rules:
      - Keys not in STANDARD_KEYS are moved into extra
      - If the caller already passed an `extra` dict it is merged last
      - None values are dropped
      - `tools` and `stream` are rejected: the loop owns both

    Example
    -------
    >>> normalize_params({"temperature": 0.2, "num_ctx": 4096})
    {'temperature': 0.2, 'extra': {'num_ctx': 4096}}
    """
    if params is None:
        return {"extra": {}}
    if not isinstance(params, dict):
        raise TypeError(f"params must be a dict, got {type(params).__name__}")
    for reserved in ("tools", "stream"):
        if reserved in params:
            raise ValueError(f"params[{reserved!r}] is managed by toolcall-bridge")

    user_extra = params.get("extra") or {}
    if not isinstance(user_extra, dict):
        raise TypeError("params['extra'] must be a dict")

    std: dict[str, Any] = {}
    extra: dict[str, Any] = {}
    for key, value in params.items():
        if key == "extra" or value is None:
            continue
        if key in STANDARD_KEYS:
            std[key] = value
        else:
            extra[key] = value

    std["extra"] = {**extra, **user_extra}
    return std


def split_extra(params: dict[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    """Return ``(standard, extra)`` copies of normalized *params*."""
    standard = dict(params)
    extra = dict(standard.pop("extra", None) or {})
    return standard, extra
