"""
Conversation summarizer.

Condenses older conversation turns into a short paragraph so the
history window stays within its token budget.

Dependencies: langchain_core, agribot.configs
System role: History compression boundary
"""

import logging

from langchain_core.language_models import BaseChatModel
from langchain_core.prompts import ChatPromptTemplate

from agribot.boundary.llm.chat_model import message_text
from agribot.core.exceptions import SummarizationError

logger = logging.getLogger(__name__)

SUMMARY_PROMPT = ChatPromptTemplate.from_messages([
    (
        "system",
        "You summarize conversations between a farmer and an agricultural "
        "assistant. Keep crops, quantities, prices, locations and decisions. "
        "Answer with one paragraph of at most {max_words} words, in the "
        "language of the conversation.",
    ),
    ("human", "{conversation}"),
])


class Summarizer:
    """
    LLM-backed summarizer.

    Usage:
        summarizer = Summarizer(model, max_words=130)
        summary = await summarizer.summarize("user: ...\\nbot: ...")
    """

    def __init__(self, model: BaseChatModel, max_words: int = 130) -> None:
        self._chain = SUMMARY_PROMPT | model
        self._max_words = max_words

    async def summarize(self, text: str) -> str:
        """
        Summarize a transcript.

        Args:
            text: Transcript, one "role: text" line per turn

        Returns:
            str: Non-empty summary

        Raises:
            SummarizationError: On provider failure or empty output
        """
        try:
            response = await self._chain.ainvoke(
                {"conversation": text, "max_words": self._max_words}
            )
        except Exception as e:
            raise SummarizationError(
                f"Summarization failed: {type(e).__name__}: {e}",
                service="summarizer",
            ) from e

        summary = message_text(response).strip()
        if not summary:
            raise SummarizationError("Summarizer returned empty output", service="summarizer")
        logger.debug(f"{__name__}:summarize - Summarized {len(text)} chars into {len(summary)}")
        return summary
