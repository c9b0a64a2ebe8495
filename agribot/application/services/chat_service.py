"""
Chat service for the farmer advisory conversation.

Orchestrates one exchange: session resolution, user turn persistence,
farmer context, intent and search decision, history window, model call
and bot turn persistence with provenance.

Dependencies: agribot.application.services, agribot.boundary.db.CRUD,
agribot.boundary.llm, agribot.core
System role: Chat service orchestration layer
"""

import logging
import time
from datetime import timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from agribot.application.services.context_service import ContextService
from agribot.application.services.search_service import SearchService
from agribot.boundary.db.CRUD.message_crud import message_crud
from agribot.boundary.db.CRUD.session_crud import session_crud
from agribot.boundary.db.models.message_model import ChatMessageModel, SenderType
from agribot.boundary.db.models.session_model import SessionModel, SessionStatus
from agribot.boundary.llm.chat_model import LanguageModelClient
from agribot.configs.chatbot import ChatbotSettings
from agribot.core.exceptions import ValidationError
from agribot.core.history_window import ConversationTurn, HistoryWindow
from agribot.core.intent_classifier import (
    classify_intent,
    generate_search_query,
    should_search_web,
)
from agribot.core.language import resolve_language
from agribot.core.prompt_builder import build_messages
from agribot.models.chat import ChatbotReply, MessageOptions, ReplyMetadata
from agribot.models.search import SearchResponse
from agribot.observability.correlation import bind_user_id
from agribot.observability.log_utils import log_exception_with_context, log_with_context
from agribot.utils.time import Clock, as_utc, utc_now

logger = logging.getLogger(__name__)

APOLOGIES = {
    "ar": "عذراً، حدث خطأ. يرجى المحاولة مرة أخرى.",
    "darja": "عذراً، حدث خطأ. يرجى المحاولة مرة أخرى.",
    "fr": "Désolé, une erreur s'est produite. Veuillez réessayer.",
    "en": "Sorry, an error occurred. Please try again.",
}
DEFAULT_APOLOGY = "عذراً، حدث خطأ (Sorry, an error occurred). يرجى المحاولة مرة أخرى (Please try again)."


def apology_for(language: str | None) -> str:
    """Localized failure message for the reply language."""
    return APOLOGIES.get(language or "", DEFAULT_APOLOGY)


class ChatService:
    """
    Chat service for farmer questions.

    The user turn is committed before any external call, so it survives
    every later failure. Everything after it is one unit of work that is
    rolled back as a whole and reported as a failure envelope.
    """

    def __init__(
        self,
        db: AsyncSession,
        context_service: ContextService,
        search_service: SearchService,
        llm_client: LanguageModelClient,
        history_window: HistoryWindow,
        settings: ChatbotSettings | None = None,
        clock: Clock = utc_now,
    ) -> None:
        """
        Initialize chat service.

        Args:
            db: AsyncSession for conversation persistence
            context_service: Farmer profile aggregator
            search_service: Cached web search
            llm_client: Language model client
            history_window: Token-budgeted history trimming
            settings: Pipeline settings
            clock: Time source
        """
        self.db = db
        self.context_service = context_service
        self.search_service = search_service
        self.llm_client = llm_client
        self.history_window = history_window
        self.settings = settings or ChatbotSettings()
        self.clock = clock

    async def handle_message(
        self,
        user_id: int,
        text: str,
        options: MessageOptions | None = None,
    ) -> ChatbotReply:
        """
        Process one farmer message end to end.

        Flow:
        1. Validate input
        2. Resolve or create the session
        3. Persist and commit the user turn
        4. Build the farmer profile and the trimmed history
        5. Classify intent, decide on and run the web search
        6. Compose the prompt and call the model
        7. Persist the bot turn, update the session, commit

        Args:
            user_id: Owning user
            text: Farmer message
            options: Session, voice, device and language options

        Returns:
            ChatbotReply: success=False with a localized apology when any
            step fails, including storing the user turn

        Raises:
            ValidationError: Missing user id or blank message
        """
        if not user_id or user_id <= 0:
            raise ValidationError("user_id is required", field="user_id")
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("message must not be empty", field="message")

        bind_user_id(user_id)
        options = options or MessageOptions()
        start = time.perf_counter()
        language = resolve_language(options.language, text)

        try:
            session = await self._resolve_session(user_id, options)
            user_msg = await self._persist_user_turn(session, text, language, options)
        except Exception as e:
            await self.db.rollback()
            log_exception_with_context(
                logger,
                f"{__name__}:handle_message - User turn could not be stored",
                e,
                user_id=user_id,
            )
            return ChatbotReply(
                success=False,
                response_text=apology_for(language),
                language=language,
                error=type(e).__name__,
                metadata=ReplyMetadata(latency_ms=int((time.perf_counter() - start) * 1000)),
            )

        session_id = session.id
        user_msg_id = user_msg.id
        user_created_at = as_utc(user_msg.created_at)
        logger.info(
            f"{__name__}:handle_message - user={user_id} session={session_id} "
            f"message={user_msg_id} language={language}"
        )

        try:
            profile = await self.context_service.build_profile(user_id)
            history = await self._load_history(session_id, user_msg_id)

            intent = classify_intent(text)
            search_performed = should_search_web(intent.intent, profile)
            search: SearchResponse | None = None
            if search_performed:
                query = generate_search_query(text, profile)
                search = await self.search_service.search(query)
            results = search.results if search is not None else []

            messages = build_messages(
                question=text,
                intent=intent.intent.value,
                language=language,
                history=history,
                profile_sentence=(
                    self.context_service.format_profile_sentence(profile)
                    if profile.has_history else None
                ),
                history_digest=profile.history_digest,
                search=search,
                max_results=self.settings.search_results_in_prompt,
            )
            llm_result = await self.llm_client.generate(messages)
            latency_ms = int((time.perf_counter() - start) * 1000)

            bot_created_at = max(
                self.clock(),
                user_created_at + timedelta(microseconds=1),
            )
            bot_msg = await message_crud.create(
                self.db,
                session_id=session_id,
                sender_type=SenderType.BOT.value,
                message_text=llm_result.text,
                language=language,
                created_at=bot_created_at,
                intent=intent.intent.value,
                confidence_score=intent.confidence,
                used_web_search=bool(results),
                used_user_history=profile.total_predictions > 0,
                web_sources=[r.model_dump(mode="json") for r in results] or None,
                response_time_ms=latency_ms,
                tokens_used=llm_result.tokens_used,
            )
            await session_crud.record_activity(self.db, session_id, bot_created_at)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            log_exception_with_context(
                logger,
                f"{__name__}:handle_message - Exchange failed after user turn",
                e,
                user_id=user_id,
                session_id=session_id,
                message_id=user_msg_id,
            )
            return ChatbotReply(
                success=False,
                session_id=session_id,
                response_text=apology_for(language),
                language=language,
                user_message_id=user_msg_id,
                error=type(e).__name__,
                metadata=ReplyMetadata(latency_ms=int((time.perf_counter() - start) * 1000)),
            )

        log_with_context(
            logger,
            logging.INFO,
            f"{__name__}:handle_message - Exchange completed in {latency_ms}ms",
            session_id=session_id,
            intent=intent.intent.value,
            search_performed=search_performed,
            results=len(results),
            tokens_used=llm_result.tokens_used,
        )
        return ChatbotReply(
            success=True,
            session_id=session_id,
            response_text=llm_result.text,
            intent=intent.intent.value,
            confidence=intent.confidence,
            sources=results,
            search_performed=search_performed,
            history_used=profile.total_predictions > 0,
            language=language,
            user_message_id=user_msg_id,
            bot_message_id=bot_msg.id,
            metadata=ReplyMetadata(
                latency_ms=latency_ms,
                ai_latency_ms=llm_result.latency_ms,
                tokens_used=llm_result.tokens_used,
            ),
        )

    async def _resolve_session(self, user_id: int, options: MessageOptions) -> SessionModel:
        if options.session_id is not None:
            requested = await session_crud.get_owned(self.db, options.session_id, user_id)
            if requested is not None and requested.is_active:
                return requested
            logger.info(
                f"{__name__}:_resolve_session - Ignoring session {options.session_id} "
                f"(missing, foreign or not active)"
            )

        current = await session_crud.get_latest_active(self.db, user_id)
        if current is not None:
            return current

        return await session_crud.create(
            self.db,
            user_id=user_id,
            status=SessionStatus.ACTIVE.value,
            started_at=self.clock(),
            device_type=options.device_type,
            user_location=options.user_location,
            total_messages=0,
        )

    async def _persist_user_turn(
        self,
        session: SessionModel,
        text: str,
        language: str,
        options: MessageOptions,
    ) -> ChatMessageModel:
        now = self.clock()
        user_msg = await message_crud.create(
            self.db,
            session_id=session.id,
            sender_type=SenderType.USER.value,
            message_text=text,
            message_audio_url=options.audio_url,
            language=language,
            created_at=now,
        )
        await session_crud.record_activity(self.db, session.id, now)
        await self.db.commit()
        return user_msg

    async def _load_history(self, session_id: UUID, before_id: int) -> list[ConversationTurn]:
        rows = await message_crud.list_recent(
            self.db,
            session_id,
            limit=self.settings.history_fetch_limit,
            before_id=before_id,
        )
        turns = [ConversationTurn(role=row.sender_type, text=row.message_text) for row in rows]
        return await self.history_window.fit(turns)
