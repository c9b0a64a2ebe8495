"""
Language model client.

Wraps a LangChain chat model behind a single generate() call that
reports text, token usage and latency. Provider failures surface as
LLMProviderError.

Dependencies: langchain_core, langchain_google_genai, python-dotenv, agribot.configs
System role: Response generation boundary
"""

import logging
import time
from dataclasses import dataclass

from dotenv import load_dotenv
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from agribot.configs.llm import LLMSettings
from agribot.core.exceptions import LLMProviderError
from agribot.utils.text import estimate_tokens

# GOOGLE_API_KEY is read by the provider SDK from the process environment
load_dotenv()
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LLMResult:
    """Outcome of one model call."""

    text: str
    tokens_used: int
    latency_ms: int


def message_text(message: BaseMessage) -> str:
    """Flatten message content (plain string or content blocks) to text."""
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def build_chat_model(settings: LLMSettings) -> BaseChatModel:
    """
    Create the assistant chat model.

    Args:
        settings: LLM settings

    Returns:
        ChatGoogleGenerativeAI configured with generation parameters
    """
    kwargs = {}
    if settings.google_api_key:
        kwargs["google_api_key"] = settings.google_api_key
    return ChatGoogleGenerativeAI(
        model=settings.model_id,
        temperature=settings.temperature,
        top_p=settings.top_p,
        max_output_tokens=settings.max_output_tokens,
        **kwargs,
    )


class LanguageModelClient:
    """
    Single-call chat completion client.

    Usage:
        client = LanguageModelClient(build_chat_model(settings.llm))
        result = await client.generate(messages)
    """

    def __init__(self, model: BaseChatModel) -> None:
        self._model = model

    async def generate(self, messages: list[BaseMessage]) -> LLMResult:
        """
        Call the model once with a fully composed message list.

        Args:
            messages: System, history and human messages

        Returns:
            LLMResult: Trimmed reply text, total tokens and call latency

        Raises:
            LLMProviderError: When the provider call fails
        """
        start = time.perf_counter()
        try:
            response = await self._model.ainvoke(messages)
        except Exception as e:
            logger.error(f"{__name__}:generate - {type(e).__name__}: {e}")
            raise LLMProviderError(
                f"Language model call failed: {type(e).__name__}",
                service="llm",
                details={"error": str(e)},
            ) from e
        latency_ms = int((time.perf_counter() - start) * 1000)

        usage = getattr(response, "usage_metadata", None) or {}
        tokens_used = usage.get("total_tokens") or estimate_tokens(
            [message_text(m) for m in messages]
        )

        text = message_text(response).strip()
        logger.info(
            f"{__name__}:generate - Completed in {latency_ms}ms, tokens={tokens_used}"
        )
        return LLMResult(text=text, tokens_used=tokens_used, latency_ms=latency_ms)
