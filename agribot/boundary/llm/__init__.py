"""
Language model boundary.

Exports:
  - LanguageModelClient, LLMResult: Response generation
  - Summarizer: History compression
  - build_chat_model(): Gemini model factory

Dependencies: langchain_core, langchain_google_genai
System role: LLM provider adapters
"""

from agribot.boundary.llm.chat_model import (
    LanguageModelClient,
    LLMResult,
    build_chat_model,
    message_text,
)
from agribot.boundary.llm.summarizer import Summarizer

__all__ = [
    "LanguageModelClient",
    "LLMResult",
    "Summarizer",
    "build_chat_model",
    "message_text",
]
