"""
Unit tests for the AI suggestion adapter and its retry policy.

The Gemini client is replaced by a fake; sleeps are recorded instead of
awaited so backoff timing can be asserted.
"""

import pytest
from google.api_core import exceptions as api_exceptions

from src.ai.retry import RetryPolicy, call_with_retry, is_quota_error
from src.ai.suggestion import SuggestionAdapter, build_suggestion_prompt
from src.registry.competencies import competencies_for_grade
from src.schemas.base import MappingType, NotificationLevel
from src.schemas.session import EditorSession
from src.schemas.suggestion import (
    CompetencySuggestion,
    RewriteRequest,
    RewriteResponse,
    SuggestionRequest,
    SuggestionResponse,
)
from src.utils.errors import AIQuotaExceededError, AISuggestionError, SuggestionInProgressError


class QuotaError(Exception):
    def __init__(self):
        super().__init__("429 RESOURCE_EXHAUSTED")
        self.status = 429


class FakeClient:
    """Returns queued results (or raises queued exceptions) in order."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    async def generate_structured(self, prompt, response_schema, **kwargs):
        self.calls.append((prompt, response_schema))
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class SleepRecorder:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


def make_request(grade="6"):
    return SuggestionRequest(
        lesson_title="Bài 1. Thông tin và dữ liệu",
        subject="Tin học",
        grade=grade,
        yccd=["Nhận biết thông tin và dữ liệu"],
        competencies=list(competencies_for_grade(grade)),
    )


def suggestions(*codes):
    return SuggestionResponse(
        suggestions=[CompetencySuggestion(code=c, reason=f"Vì {c}") for c in codes]
    )


# =============================================================================
# RETRY
# =============================================================================

class TestQuotaDetection:

    @pytest.mark.parametrize("exc", [
        QuotaError(),
        Exception("You exceeded your current quota"),
        Exception("RESOURCE_EXHAUSTED"),
        api_exceptions.ResourceExhausted("slow down"),
        api_exceptions.TooManyRequests("slow down"),
    ])
    def test_quota_errors(self, exc) -> None:
        assert is_quota_error(exc)

    @pytest.mark.parametrize("exc", [
        ValueError("bad json"),
        api_exceptions.PermissionDenied("bad key"),
        ConnectionError("network down"),
    ])
    def test_other_errors(self, exc) -> None:
        assert not is_quota_error(exc)


class TestCallWithRetry:

    def test_delays_double(self) -> None:
        assert RetryPolicy(max_retries=3, base_delay=2.0, multiplier=2.0).delays() == [2.0, 4.0, 8.0]

    @pytest.mark.asyncio
    async def test_recovers_after_quota_errors(self) -> None:
        client = FakeClient(QuotaError(), QuotaError(), "ok")
        sleep = SleepRecorder()
        result = await call_with_retry(
            lambda: client.generate_structured("p", None), RetryPolicy(), sleep=sleep
        )
        assert result == "ok"
        assert sleep.delays == [2.0, 4.0]

    @pytest.mark.asyncio
    async def test_exhaustion_raises_quota_error(self) -> None:
        client = FakeClient(*[QuotaError() for _ in range(4)])
        sleep = SleepRecorder()
        with pytest.raises(AIQuotaExceededError) as info:
            await call_with_retry(lambda: client.generate_structured("p", None), RetryPolicy(), sleep=sleep)
        assert info.value.attempts == 4
        assert len(client.calls) == 4
        assert sleep.delays == [2.0, 4.0, 8.0]

    @pytest.mark.asyncio
    async def test_other_errors_not_retried(self) -> None:
        client = FakeClient(ValueError("boom"), "never")
        sleep = SleepRecorder()
        with pytest.raises(ValueError):
            await call_with_retry(lambda: client.generate_structured("p", None), RetryPolicy(), sleep=sleep)
        assert len(client.calls) == 1
        assert sleep.delays == []


# =============================================================================
# ADAPTER
# =============================================================================

class TestSuggestionAdapter:

    def test_prompt_lists_registry(self) -> None:
        prompt = build_suggestion_prompt(make_request())
        assert "1.1.TC1a" in prompt
        assert "Bài 1. Thông tin và dữ liệu" in prompt

    @pytest.mark.asyncio
    async def test_unknown_codes_discarded(self) -> None:
        adapter = SuggestionAdapter(FakeClient(suggestions("1.1.TC1a", "9.9.ZZ", "1.1.TC2a")))
        result = await adapter.suggest(make_request("6"))
        assert [s.code for s in result] == ["1.1.TC1a"]

    @pytest.mark.asyncio
    async def test_loading_flag_guards_concurrent_calls(self) -> None:
        session = EditorSession(ai_loading=True)
        adapter = SuggestionAdapter(FakeClient(suggestions("1.1.TC1a")))
        with pytest.raises(SuggestionInProgressError):
            await adapter.suggest(make_request(), session)

    @pytest.mark.asyncio
    async def test_loading_flag_reset_after_failure(self) -> None:
        session = EditorSession()
        adapter = SuggestionAdapter(FakeClient(RuntimeError("auth failed")))
        with pytest.raises(AISuggestionError):
            await adapter.suggest(make_request(), session)
        assert session.ai_loading is False

    @pytest.mark.asyncio
    async def test_rewrite_reason(self) -> None:
        adapter = SuggestionAdapter(FakeClient(RewriteResponse(reason="  Học sinh tra cứu.  ")))
        request = RewriteRequest(
            lesson_title="Bài 1", subject="Tin học", grade="6", code="1.1.TC1a",
        )
        assert await adapter.rewrite_reason(request) == "Học sinh tra cứu."


# =============================================================================
# STORE INTEGRATION
# =============================================================================

class TestSuggestForActiveLesson:

    @pytest.mark.asyncio
    async def test_applies_suggested_mappings(self, store, session) -> None:
        lesson = store.topics("Tin học", "6")[0].lessons[1]
        session.select_lesson(lesson.id)
        adapter = SuggestionAdapter(FakeClient(suggestions("5.2.TC1a")))

        assert await store.suggest_for_active_lesson(session, adapter)
        detail = store.active_lesson(session).mappings["5.2.TC1a"]
        assert detail.type == MappingType.SUGGESTED
        assert detail.reason == "Vì 5.2.TC1a"
        assert session.ai_loading is False

    @pytest.mark.asyncio
    async def test_quota_exhaustion_becomes_warning(self, store, session, notifications) -> None:
        session.select_lesson(store.topics("Tin học", "6")[0].lessons[0].id)
        before = store.data
        policy = RetryPolicy(max_retries=1, base_delay=0.0)
        adapter = SuggestionAdapter(FakeClient(QuotaError(), QuotaError()), policy)

        assert await store.suggest_for_active_lesson(session, adapter) is False
        assert store.data is before
        assert notifications.active()[-1].level == NotificationLevel.WARNING

    @pytest.mark.asyncio
    async def test_other_failure_becomes_error(self, store, session, notifications) -> None:
        session.select_lesson(store.topics("Tin học", "6")[0].lessons[0].id)
        adapter = SuggestionAdapter(FakeClient(ValueError("malformed")))

        assert await store.suggest_for_active_lesson(session, adapter) is False
        assert notifications.active()[-1].level == NotificationLevel.ERROR

    @pytest.mark.asyncio
    async def test_no_active_lesson(self, store, session) -> None:
        adapter = SuggestionAdapter(FakeClient())
        assert await store.suggest_for_active_lesson(session, adapter) is False

    @pytest.mark.asyncio
    async def test_rewrite_reason_with_ai(self, store, session) -> None:
        lesson = store.topics("Tin học", "6")[0].lessons[0]
        session.select_lesson(lesson.id)
        code = next(iter(lesson.mappings))
        adapter = SuggestionAdapter(FakeClient(RewriteResponse(reason="Minh chứng mới")))

        assert await store.rewrite_reason_with_ai(session, code, adapter)
        assert store.active_lesson(session).mappings[code].reason == "Minh chứng mới"
