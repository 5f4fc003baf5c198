"""
AI Suggestion Adapter

Asks Gemini which digital competencies a lesson develops, and rewrites the
rationale of a single mapping. The adapter only produces data; applying it
to the curriculum is the store's job.

Error contract:
- quota / rate-limit failures are retried, then AIQuotaExceededError
- anything else becomes AISuggestionError without retry
- a call while ``session.ai_loading`` is set raises SuggestionInProgressError
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from src.ai.gemini_client import GeminiClient, get_gemini_client
from src.ai.retry import RetryPolicy, call_with_retry
from src.schemas.session import EditorSession
from src.schemas.suggestion import (
    CompetencySuggestion,
    RewriteRequest,
    RewriteResponse,
    SuggestionRequest,
    SuggestionResponse,
)
from src.utils.errors import AIQuotaExceededError, AISuggestionError, SuggestionInProgressError

logger = logging.getLogger(__name__)


def build_suggestion_prompt(request: SuggestionRequest) -> str:
    competencies = "\n".join(f"- {c.code}: {c.text}" for c in request.competencies)
    yccd = "\n".join(f"- {y}" for y in request.yccd) or "- (chưa có)"
    return (
        "Bạn là chuyên gia giáo dục THCS tại Việt Nam.\n"
        f"Môn học: {request.subject}. Lớp: {request.grade}.\n"
        f"Bài học: {request.lesson_title}\n"
        f"Yêu cầu cần đạt:\n{yccd}\n\n"
        "Danh sách năng lực số (chỉ được chọn mã trong danh sách này):\n"
        f"{competencies}\n\n"
        "Hãy đề xuất các mã năng lực số phù hợp nhất để tích hợp vào bài học, "
        "mỗi mã kèm một câu minh chứng ngắn (reason) mô tả hoạt động cụ thể. "
        "Trả về JSON theo schema đã cho."
    )


def build_rewrite_prompt(request: RewriteRequest) -> str:
    yccd = "\n".join(f"- {y}" for y in request.yccd) or "- (chưa có)"
    return (
        "Bạn là chuyên gia giáo dục THCS tại Việt Nam.\n"
        f"Môn học: {request.subject}. Lớp: {request.grade}.\n"
        f"Bài học: {request.lesson_title}\n"
        f"Yêu cầu cần đạt:\n{yccd}\n\n"
        f"Năng lực số: {request.code} - {request.competency_text}\n"
        f"Minh chứng hiện tại: {request.current_reason or '(trống)'}\n\n"
        "Viết lại minh chứng thành một câu rõ ràng, cụ thể, gắn với hoạt động "
        "của học sinh trong bài. Trả về JSON theo schema đã cho."
    )


class SuggestionAdapter:
    """
    Usage:
        adapter = SuggestionAdapter()
        suggestions = await adapter.suggest(request, session)
    """

    def __init__(
        self,
        client: GeminiClient | None = None,
        policy: RetryPolicy | None = None,
    ) -> None:
        self._client = client
        self.policy = policy or RetryPolicy()

    @property
    def client(self) -> GeminiClient:
        if self._client is None:
            self._client = get_gemini_client()
        return self._client

    @contextmanager
    def _loading(self, session: EditorSession | None) -> Iterator[None]:
        if session is None:
            yield
            return
        if session.ai_loading:
            raise SuggestionInProgressError()
        session.ai_loading = True
        try:
            yield
        finally:
            session.ai_loading = False

    async def _call(self, prompt: str, schema):
        try:
            return await call_with_retry(
                lambda: self.client.generate_structured(prompt, schema),
                self.policy,
            )
        except (AIQuotaExceededError, AISuggestionError):
            raise
        except Exception as e:
            logger.error(f"AI call failed: {e}")
            raise AISuggestionError(f"AI call failed: {e}", cause=e) from e

    async def suggest(
        self,
        request: SuggestionRequest,
        session: EditorSession | None = None,
    ) -> list[CompetencySuggestion]:
        """Proposed {code, reason} pairs, restricted to ``request.competencies``."""
        with self._loading(session):
            response: SuggestionResponse = await self._call(
                build_suggestion_prompt(request), SuggestionResponse
            )

        known = {c.code for c in request.competencies}
        accepted = []
        for suggestion in response.suggestions:
            if suggestion.code not in known:
                logger.warning(f"Discarding unknown competency code '{suggestion.code}'")
                continue
            accepted.append(suggestion)
        logger.info(
            f"AI suggested {len(accepted)} competencies for '{request.lesson_title}'"
        )
        return accepted

    async def rewrite_reason(
        self,
        request: RewriteRequest,
        session: EditorSession | None = None,
    ) -> str:
        with self._loading(session):
            response: RewriteResponse = await self._call(
                build_rewrite_prompt(request), RewriteResponse
            )
        return response.reason.strip()
