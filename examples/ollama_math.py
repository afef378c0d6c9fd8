"""Arithmetic tools against a locally hosted Ollama model.

  python examples/ollama_math.py --host http://localhost:11434 --model qwen2.5:3b
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from toolcall_bridge import OllamaLLM, ToolCallLoop, TransportError
from toolcall_bridge.providers.ollama import DEFAULT_OLLAMA_HOST
from toolcall_bridge.sample_tools import arithmetic_registry

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)


async def run(model: str, host: str) -> None:
    query = "What is three minus one?"
    print("Prompt:", query)

    async with OllamaLLM(model, base_url=host) as llm:
        loop = ToolCallLoop(llm, arithmetic_registry())
        try:
            answer = await loop.process_query(query)
        except TransportError as exc:
            logger.error("An error occurred: %s", exc)
            return
    print("Final response:", answer)


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--model", default="qwen2.5:3b")
    parser.add_argument("--host", default=DEFAULT_OLLAMA_HOST)
    args = parser.parse_args()

    asyncio.run(run(args.model, args.host))
