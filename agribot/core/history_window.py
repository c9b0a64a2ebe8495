"""
Conversation history window.

Keeps prior turns under an estimated token budget. When the budget is
exceeded, older turns are folded into one summary turn and only the most
recent turns are kept verbatim.

Dependencies: agribot.utils.text, agribot.observability
System role: Bounded dialogue memory
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from agribot.core.exceptions import SummarizationError
from agribot.observability.log_utils import log_degradation
from agribot.utils.text import estimate_tokens

logger = logging.getLogger(__name__)

SUMMARY_PREFIX = "Previous conversation summary: "


class SupportsSummarize(Protocol):
    async def summarize(self, text: str) -> str:
        ...


@dataclass(frozen=True)
class ConversationTurn:
    """One prior turn as seen by the prompt: role is user, bot or system."""

    role: str
    text: str

    @property
    def is_summary(self) -> bool:
        return self.role == "system"


class HistoryWindow:
    """
    Token-budgeted history trimming with summarization.

    Usage:
        window = HistoryWindow(summarizer, token_budget=6000, keep_recent=5)
        turns = await window.fit(turns)
    """

    def __init__(
        self,
        summarizer: SupportsSummarize | None,
        token_budget: int = 6000,
        keep_recent: int = 5,
    ) -> None:
        """
        Initialize the window.

        Args:
            summarizer: Summarization provider; None keeps only recent turns
            token_budget: Estimated token ceiling for the whole history
            keep_recent: Turns kept verbatim once the budget is exceeded
        """
        self._summarizer = summarizer
        self._token_budget = token_budget
        self._keep_recent = keep_recent

    def estimate(self, turns: Sequence[ConversationTurn]) -> int:
        """Estimated tokens for a sequence of turns."""
        return estimate_tokens(turn.text for turn in turns)

    async def fit(self, turns: Sequence[ConversationTurn]) -> list[ConversationTurn]:
        """
        Fit chronological turns into the token budget.

        Args:
            turns: Prior turns, oldest first

        Returns:
            Turns unchanged when within budget; otherwise an optional
            summary turn followed by the most recent turns
        """
        turns = list(turns)
        if self.estimate(turns) <= self._token_budget:
            return turns

        recent = turns[-self._keep_recent:] if self._keep_recent > 0 else []
        older = turns[: len(turns) - len(recent)]
        if not older or self._summarizer is None:
            return recent

        transcript = "\n".join(f"{turn.role}: {turn.text}" for turn in older)
        try:
            summary = await self._summarizer.summarize(transcript)
        except SummarizationError as e:
            log_degradation(logger, "summarizer", e, turns=len(older))
            return recent

        if not summary or not summary.strip():
            return recent

        logger.info(
            f"{__name__}:fit - Summarized {len(older)} turns, kept {len(recent)}"
        )
        return [ConversationTurn(role="system", text=SUMMARY_PREFIX + summary.strip()), *recent]
