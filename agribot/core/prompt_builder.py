"""
Assistant prompt composition.

Builds the message list sent to the language model: a system block with
instructions, language directive and any conversation summary; prior
turns; and a human block with farmer context, search findings and the
tagged question.

Dependencies: langchain_core.prompts, langchain_core.messages
System role: Prompt template for AgriBot behavior
"""

from collections.abc import Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder

from agribot.core.history_window import ConversationTurn
from agribot.core.language import language_directive
from agribot.models.search import SearchResponse

SYSTEM_PROMPT = """You are AgriBot, an agricultural consultant assistant for Algerian farmers.

## Capabilities
- Provide personalized crop advice based on the farmer's soil data and past yields
- Answer questions about crop prices, weather, and agricultural best practices
- Communicate in Algerian Darja, French, Modern Standard Arabic or English
- Explain agricultural concepts in simple, accessible language

## Guidelines
1. Reference the farmer's actual field data when giving advice
2. When discussing prices, remind farmers about market volatility
3. For disease questions, give immediate actionable steps and recommend expert consultation
4. Keep responses concise (4-5 sentences at most)
5. When you don't know something, say so honestly
6. Use metric units (hectares, kg, tons)
7. Express prices in Algerian Dinar (DZD)

## Response Style
- Be friendly and supportive
- Avoid technical jargon
- Always include practical next steps"""

CHAT_PROMPT = ChatPromptTemplate.from_messages([
    ("system", "{system_block}"),
    MessagesPlaceholder("history"),
    ("human", "{user_block}"),
])


def _system_block(language: str, summaries: Sequence[ConversationTurn]) -> str:
    block = f"{SYSTEM_PROMPT}\n\n## Language\n{language_directive(language)}"
    for turn in summaries:
        block += f"\n\n## Earlier in this conversation\n{turn.text}"
    return block


def _search_block(search: SearchResponse, max_results: int) -> str:
    lines = ["**Recent Information from Web Search:**"]
    for idx, result in enumerate(search.results[:max_results], start=1):
        lines.append(f"{idx}. {result.title}")
        lines.append(f"   {result.snippet or result.content}")
        lines.append(f"   Source: {result.url}")
    if search.answer:
        lines.append(f"Search summary: {search.answer}")
    return "\n".join(lines)


def build_user_block(
    question: str,
    intent: str,
    profile_sentence: str | None = None,
    history_digest: str = "",
    search: SearchResponse | None = None,
    max_results: int = 3,
) -> str:
    """
    Compose the human message for the current question.

    Args:
        question: Farmer's message
        intent: Classified intent value
        profile_sentence: One-sentence farmer summary, None without history
        history_digest: Multi-line digest of past predictions
        search: Search response, included only when it has results
        max_results: Number of search results to include

    Returns:
        str: Prompt text
    """
    sections = []
    if profile_sentence:
        context = f"**Farmer's Context:**\n{profile_sentence}"
        if history_digest:
            context += f"\n{history_digest}"
        sections.append(context)

    if search is not None and search.results:
        sections.append(_search_block(search, max_results))

    sections.append(f"**Farmer's Question (Intent: {intent}):**\n{question}")
    return "\n\n".join(sections)


def to_langchain_history(turns: Sequence[ConversationTurn]) -> list[BaseMessage]:
    """Map user/bot turns to Human/AI messages; summary turns are skipped."""
    messages: list[BaseMessage] = []
    for turn in turns:
        if turn.role == "user":
            messages.append(HumanMessage(content=turn.text))
        elif turn.role == "bot":
            messages.append(AIMessage(content=turn.text))
    return messages


def build_messages(
    question: str,
    intent: str,
    language: str,
    history: Sequence[ConversationTurn] = (),
    profile_sentence: str | None = None,
    history_digest: str = "",
    search: SearchResponse | None = None,
    max_results: int = 3,
) -> list[BaseMessage]:
    """
    Build the full message list for one model call.

    Summary turns go into the system block since chat providers accept a
    single leading system message.

    Returns:
        list[BaseMessage]: System message, history, human message
    """
    summaries = [turn for turn in history if turn.is_summary]
    return CHAT_PROMPT.format_messages(
        system_block=_system_block(language, summaries),
        history=to_langchain_history(history),
        user_block=build_user_block(
            question,
            intent,
            profile_sentence=profile_sentence,
            history_digest=history_digest,
            search=search,
            max_results=max_results,
        ),
    )
