"""Stock price bot: a hosted model with one tool, traced to Langfuse.

Configuration comes from the environment (or a .env file):
  GEMINI_API_KEY (or the key of --provider)
  LANGFUSE_PUBLIC_KEY / LANGFUSE_SECRET_KEY / LANGFUSE_HOST  (optional)
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from dataclasses import replace

from toolcall_bridge import (
    Provider,
    Settings,
    ToolBridgeError,
    ToolCallLoop,
    Tracer,
    create_llm_from_settings,
)
from toolcall_bridge.sample_tools import stock_price_registry

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)

QUERIES = ["What's the current stock price of Apple?"]


async def main(settings: Settings) -> None:
    registry = stock_price_registry()

    with Tracer.from_settings(settings) as tracer:
        async with create_llm_from_settings(settings) as llm:
            loop = ToolCallLoop(
                llm, registry, tracer=tracer, max_rounds=settings.max_rounds
            )
            for query in QUERIES:
                try:
                    response = await loop.process_query(query)
                except ToolBridgeError as exc:
                    logger.error("Error for query %r: %s", query, exc)
                    continue
                print(f"Query: {query}")
                print(f"Response: {response}\n")
        # Ensure all spans are sent before exiting
        tracer.flush()


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--provider",
        choices=[p.value for p in Provider if p is not Provider.OLLAMA],
        default=None,
    )
    parser.add_argument("--model", default=None)
    args = parser.parse_args()

    settings = Settings.from_env()
    if args.provider:
        settings = replace(settings, provider=Provider(args.provider))
    if args.model:
        settings = replace(settings, model=args.model)

    asyncio.run(main(settings))
