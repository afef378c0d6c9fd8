"""Mock tools used by the example programs."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from toolcall_bridge.registry import ToolRegistry
from toolcall_bridge.types import ToolDeclaration

STOCK_PRICE_TOOL = ToolDeclaration(
    name="getStockPrice",
    description="Get the current stock price for a given company symbol",
    parameters={
        "type": "object",
        "properties": {
            "symbol": {
                "type": "string",
                "description": "The stock symbol (e.g., AAPL for Apple)",
            },
        },
        "required": ["symbol"],
    },
)

_TWO_NUMBERS = {
    "type": "object",
    "required": ["a", "b"],
    "properties": {
        "a": {"type": "number", "description": "The first number"},
        "b": {"type": "number", "description": "The second number"},
    },
}

ADD_TOOL = ToolDeclaration(
    name="addTwoNumbers",
    description="Add two numbers together",
    parameters=_TWO_NUMBERS,
)

SUBTRACT_TOOL = ToolDeclaration(
    name="subtractTwoNumbers",
    description="Subtract two numbers",
    parameters=_TWO_NUMBERS,
)


def get_stock_price(symbol: str) -> dict[str, Any]:
    # static quote; there is no market data source behind this
    return {
        "symbol": symbol.upper(),
        "price": 150.25,
        "currency": "USD",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def add_two_numbers(a: float, b: float) -> float:
    return a + b


def subtract_two_numbers(a: float, b: float) -> float:
    return a - b


def stock_price_registry() -> ToolRegistry:
    registry = ToolRegistry()
    registry.register(STOCK_PRICE_TOOL, get_stock_price)
    return registry


def arithmetic_registry() -> ToolRegistry:
    registry = ToolRegistry()
    registry.register(ADD_TOOL, add_two_numbers)
    registry.register(SUBTRACT_TOOL, subtract_two_numbers)
    return registry
