"""
Curriculum Store

Owns the full dataset (subject → grade → topics) and the notification
queue. Every edit is computed by a pure function from
``src.curriculum.operations`` and committed through
``replace_grade_topics``, which persists the whole dataset.

The dataset dict and each subject's dict are replaced on write, never
mutated, so identity comparison is enough to detect a change.
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable

from config.settings import ANCHOR_SUBJECT, EXPORT_DIR, STORAGE_KEY
from src.curriculum import operations as ops
from src.curriculum.context import resolve_lesson_context, same_id
from src.curriculum.gap_matrix import (
    CoverageCell,
    GradeCoverage,
    build_coverage_matrix,
    find_gaps,
    with_supplementary_lesson,
)
from src.curriculum.usage import UsageIndex, UsageIndexCache
from src.export.base import ExportedDocument, ExportRequest
from src.export.document import render_document, save_document
from src.registry.competencies import competencies_for_grade, competency_text
from src.registry.default_curriculum import default_curriculum, has_bundled_default
from src.schemas.curriculum import (
    CURRICULUM_DATA_ADAPTER,
    DATASET_ADAPTER,
    CurriculumData,
    Dataset,
    Lesson,
    Topic,
    dump_curriculum_data,
    dump_dataset,
    new_lesson_id,
    noncanonical_lesson_ids,
    reserve_lesson_ids,
)
from src.schemas.session import EditorSession
from src.schemas.suggestion import CompetencySuggestion, RewriteRequest, SuggestionRequest
from src.storage.blob_store import BlobStore
from src.utils.errors import (
    AIQuotaExceededError,
    AISuggestionError,
    StorageLoadError,
    SuggestionInProgressError,
)
from src.utils.notifications import NotificationQueue
from src.utils.validation import SchemaValidationError, validate_with_adapter

logger = logging.getLogger(__name__)

TopicsFn = Callable[[list[Topic]], list[Topic]]

_EMPTY_SUBJECT: CurriculumData = {}


def seed_dataset() -> Dataset:
    return {ANCHOR_SUBJECT: default_curriculum(ANCHOR_SUBJECT)}


class CurriculumStore:
    """
    Usage:
        store = CurriculumStore(BlobStore())
        session = EditorSession()
        new_id = store.add_lesson(session)
        store.update_active_lesson(session, title="Bài 1")
    """

    def __init__(
        self,
        blob_store: BlobStore,
        notifications: NotificationQueue | None = None,
        storage_key: str = STORAGE_KEY,
    ) -> None:
        self.blob_store = blob_store
        self.notifications = notifications if notifications is not None else NotificationQueue()
        self.storage_key = storage_key
        self._usage_cache = UsageIndexCache()
        self._data: Dataset = self._load()
        reserve_lesson_ids(self._data)

    # =========================================================================
    # LOAD / PERSIST
    # =========================================================================

    def _read(self) -> Dataset | None:
        raw_text = self.blob_store.get(self.storage_key)
        if raw_text is None:
            return None
        try:
            raw = json.loads(raw_text)
        except json.JSONDecodeError as e:
            raise StorageLoadError(self.storage_key, f"invalid JSON: {e}") from e

        legacy_ids = noncanonical_lesson_ids(raw)
        try:
            data = validate_with_adapter(DATASET_ADAPTER, raw, "Dataset")
        except SchemaValidationError as e:
            raise StorageLoadError(self.storage_key, str(e)) from e

        if legacy_ids:
            logger.warning(
                f"Migrated {len(legacy_ids)} non-string lesson ids to strings "
                f"(e.g. {legacy_ids[:3]})"
            )
            self._persist(data)
        return data

    def _load(self) -> Dataset:
        try:
            data = self._read()
        except StorageLoadError as e:
            logger.error(f"{e}; falling back to the bundled default")
            data = None
        if data is None:
            logger.info(f"Seeding dataset with the bundled '{ANCHOR_SUBJECT}' curriculum")
            data = seed_dataset()
            self._persist(data)
        return data

    def _persist(self, data: Dataset) -> None:
        payload = json.dumps(dump_dataset(data), ensure_ascii=False)
        self.blob_store.put(self.storage_key, payload)

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    @property
    def data(self) -> Dataset:
        return self._data

    def subjects(self) -> list[str]:
        return list(self._data.keys())

    def subject_data(self, subject: str) -> CurriculumData:
        return self._data.get(subject, _EMPTY_SUBJECT)

    def topics(self, subject: str, grade: str) -> list[Topic]:
        return self.subject_data(subject).get(str(grade), [])

    def session_topics(self, session: EditorSession) -> list[Topic]:
        return self.topics(session.subject, session.grade_key)

    def active_lesson(self, session: EditorSession) -> Lesson | None:
        ctx = resolve_lesson_context(self.session_topics(session), session.lesson_id)
        return ctx.lesson if ctx else None

    # =========================================================================
    # PRIMITIVE
    # =========================================================================

    def replace_grade_topics(self, subject: str, grade: str, new_topics: list[Topic]) -> None:
        """Swap one grade's topic list and persist the whole dataset."""
        subject_data = {**self.subject_data(subject), str(grade): list(new_topics)}
        data = {**self._data, subject: subject_data}
        self._persist(data)
        self._data = data

    def _apply(self, session: EditorSession, fn: TopicsFn) -> bool:
        topics = self.session_topics(session)
        new_topics = fn(topics)
        if new_topics is topics:
            return False
        self.replace_grade_topics(session.subject, session.grade_key, new_topics)
        return True

    # =========================================================================
    # LESSONS AND TOPICS
    # =========================================================================

    def add_lesson(self, session: EditorSession) -> str:
        lesson_id = new_lesson_id()
        self._apply(session, lambda t: ops.add_lesson(t, ops.new_blank_lesson(lesson_id)))
        session.select_lesson(lesson_id)
        return lesson_id

    def update_lesson(self, session: EditorSession, lesson_id: Any, **updates: Any) -> bool:
        return self._apply(session, lambda t: ops.update_lesson(t, lesson_id, **updates))

    def update_active_lesson(self, session: EditorSession, **updates: Any) -> bool:
        return self.update_lesson(session, session.lesson_id, **updates)

    def delete_lesson(self, session: EditorSession, lesson_id: Any) -> bool:
        changed = self._apply(session, lambda t: ops.delete_lesson(t, lesson_id))
        if changed and same_id(session.lesson_id, lesson_id):
            session.select_lesson(None)
        return changed

    def move_lesson(self, session: EditorSession, lesson_id: Any, direction: int) -> bool:
        return self._apply(session, lambda t: ops.move_lesson(t, lesson_id, direction))

    def reorder_lesson(
        self,
        session: EditorSession,
        source_id: Any,
        target_topic_index: int,
        target_lesson_index: int,
    ) -> bool:
        return self._apply(
            session,
            lambda t: ops.reorder_lesson(t, source_id, target_topic_index, target_lesson_index),
        )

    def bulk_update_field(self, session: EditorSession, field: str, value: Any) -> bool:
        changed = self._apply(session, lambda t: ops.bulk_update_field(t, field, value))
        if changed:
            self.notifications.success(f'Đã áp dụng "{value}" cho toàn bộ kế hoạch.')
        return changed

    def add_topic(self, session: EditorSession, title: str = ops.DEFAULT_TOPIC_TITLE, semester: int = 1) -> bool:
        return self._apply(session, lambda t: ops.add_topic(t, title, semester))

    def delete_topic(self, session: EditorSession, topic_index: int) -> bool:
        topics = self.session_topics(session)
        removed_active = (
            0 <= topic_index < len(topics)
            and any(same_id(l.id, session.lesson_id) for l in topics[topic_index].lessons)
        )
        changed = self._apply(session, lambda t: ops.delete_topic(t, topic_index))
        if changed and removed_active:
            session.select_lesson(None)
        return changed

    def rename_topic(self, session: EditorSession, topic_index: int, title: str) -> bool:
        return self._apply(session, lambda t: ops.rename_topic(t, topic_index, title))

    def set_topic_semester(self, session: EditorSession, topic_index: int, semester: int) -> bool:
        return self._apply(session, lambda t: ops.set_topic_semester(t, topic_index, semester))

    def move_topic(self, session: EditorSession, topic_index: int, direction: int) -> bool:
        return self._apply(session, lambda t: ops.move_topic(t, topic_index, direction))

    # =========================================================================
    # ACTIVE LESSON: REQUIREMENTS AND MAPPINGS
    # =========================================================================

    def set_yccd(self, session: EditorSession, yccd: list[str]) -> bool:
        return self._apply(session, lambda t: ops.set_yccd(t, session.lesson_id, yccd))

    def update_yccd(self, session: EditorSession, index: int, value: str) -> bool:
        return self._apply(session, lambda t: ops.update_yccd(t, session.lesson_id, index, value))

    def add_yccd(self, session: EditorSession, value: str = "") -> bool:
        return self._apply(session, lambda t: ops.add_yccd(t, session.lesson_id, value))

    def delete_yccd(self, session: EditorSession, index: int) -> bool:
        return self._apply(session, lambda t: ops.delete_yccd(t, session.lesson_id, index))

    def set_mapping(self, session: EditorSession, code: str, selected: bool) -> bool:
        return self._apply(session, lambda t: ops.set_mapping(t, session.lesson_id, code, selected))

    def set_mapping_reason(self, session: EditorSession, code: str, reason: str) -> bool:
        return self._apply(
            session, lambda t: ops.set_mapping_reason(t, session.lesson_id, code, reason)
        )

    def apply_suggestions(self, session: EditorSession, suggestions: list[CompetencySuggestion]) -> bool:
        pairs = [(s.code, s.reason) for s in suggestions]
        return self._apply(session, lambda t: ops.apply_suggestions(t, session.lesson_id, pairs))

    # =========================================================================
    # SPLIT / MERGE
    # =========================================================================

    def split_lesson(self, session: EditorSession) -> str | None:
        """Split the active lesson; returns the id of the continuation lesson."""
        new_id = new_lesson_id()
        if not self._apply(session, lambda t: ops.split_lesson(t, session.lesson_id, new_id)):
            return None
        return new_id

    def can_merge_next(self, session: EditorSession) -> bool:
        return ops.can_merge(self.session_topics(session), session.lesson_id, 1)

    def can_merge_previous(self, session: EditorSession) -> bool:
        return ops.can_merge(self.session_topics(session), session.lesson_id, -1)

    def merge_next(self, session: EditorSession) -> bool:
        return self._apply(session, lambda t: ops.merge_lesson(t, session.lesson_id, 1))

    def merge_previous(self, session: EditorSession) -> bool:
        """Merge into the previous lesson, which survives and becomes active."""
        ctx = resolve_lesson_context(self.session_topics(session), session.lesson_id)
        if ctx is None or ctx.lesson_index == 0:
            return False
        survivor = ctx.topic.lessons[ctx.lesson_index - 1].id
        changed = self._apply(session, lambda t: ops.merge_lesson(t, session.lesson_id, -1))
        if changed:
            session.select_lesson(survivor)
        return changed

    # =========================================================================
    # DERIVED VIEWS
    # =========================================================================

    def usage_index(self, session: EditorSession) -> UsageIndex:
        return self._usage_cache.get(
            self.subject_data(session.subject), session.grade_key, session.lesson_id
        )

    def _anchor_data(self, session: EditorSession) -> CurriculumData | None:
        if session.subject == ANCHOR_SUBJECT:
            return None
        return self._data.get(ANCHOR_SUBJECT)

    def coverage_matrix(self, session: EditorSession) -> list[GradeCoverage]:
        return build_coverage_matrix(self.subject_data(session.subject), self._anchor_data(session))

    def gaps(self, session: EditorSession) -> dict[str, list[CoverageCell]]:
        """Uncovered or weak cells per grade."""
        return find_gaps(self.subject_data(session.subject), self._anchor_data(session))

    def add_supplementary_lesson(self, subject: str, grade: str, title: str, competency_code: str) -> str:
        lesson_id = new_lesson_id()
        topics = self.topics(subject, grade)
        self.replace_grade_topics(
            subject, grade, with_supplementary_lesson(topics, lesson_id, title, competency_code)
        )
        self.notifications.success(
            f'Đã thêm hoạt động "{title}" vào Kế hoạch dạy học Lớp {grade}.'
        )
        return lesson_id

    # =========================================================================
    # EXPORT
    # =========================================================================

    def export_request(self, session: EditorSession) -> ExportRequest:
        return ExportRequest(
            subject=session.subject,
            grade=session.grade_key,
            topics=self.session_topics(session),
            view_mode=session.view_mode,
            competencies=tuple(competencies_for_grade(session.grade_key)),
            lesson=self.active_lesson(session),
        )

    def render_document(self, session: EditorSession) -> ExportedDocument:
        return render_document(self.export_request(session))

    def export_document(self, session: EditorSession, directory: str | Path = EXPORT_DIR) -> Path:
        path = save_document(self.render_document(session), directory)
        self.notifications.success("Đã xuất file Word thành công!")
        return path

    # =========================================================================
    # RESET AND JSON BACKUP
    # =========================================================================

    def reset_subject(self, session: EditorSession, confirmed: bool = False) -> bool:
        """Replace the session's subject with its bundled default."""
        subject = session.subject
        if not has_bundled_default(subject):
            self.notifications.info(f"Môn {subject} chưa có dữ liệu mặc định để khôi phục.")
            return False
        if not confirmed:
            return False
        data = {**self._data, subject: default_curriculum(subject)}
        self._persist(data)
        self._data = data
        reserve_lesson_ids(data)
        session.select_lesson(None)
        self.notifications.success(f"Đã khôi phục dữ liệu mặc định cho môn {subject}.")
        return True

    def export_json(self, subject: str | None = None) -> str:
        if subject is None:
            payload = dump_dataset(self._data)
        else:
            payload = dump_curriculum_data(self.subject_data(subject))
        return json.dumps(payload, ensure_ascii=False, indent=2)

    def import_json(self, text: str | bytes, subject: str | None = None) -> bool:
        """
        Restore the full dataset, or one subject when ``subject`` is given.

        ``text`` may be the raw bytes of an uploaded file (UTF-8).
        """
        try:
            if isinstance(text, bytes):
                text = text.decode("utf-8")
            raw = json.loads(text)
            if subject is None:
                imported = validate_with_adapter(DATASET_ADAPTER, raw, "Dataset")
                data = imported
            else:
                imported = validate_with_adapter(CURRICULUM_DATA_ADAPTER, raw, "CurriculumData")
                data = {**self._data, subject: imported}
        except (UnicodeDecodeError, json.JSONDecodeError, SchemaValidationError) as e:
            logger.error(f"Import failed: {e}")
            self.notifications.error("File JSON không hợp lệ, dữ liệu không thay đổi.")
            return False
        self._persist(data)
        self._data = data
        reserve_lesson_ids(data)
        self.notifications.success("Đã nhập dữ liệu thành công!")
        return True

    # =========================================================================
    # AI
    # =========================================================================

    async def suggest_for_active_lesson(self, session: EditorSession, adapter) -> bool:
        """
        Ask the adapter for competencies and apply them to the active lesson.

        Failures end up in the notification queue, never raised.
        """
        lesson = self.active_lesson(session)
        if lesson is None:
            return False
        request = SuggestionRequest(
            lesson_title=lesson.title,
            subject=session.subject,
            grade=session.grade_key,
            yccd=[y for y in lesson.yccd if y.strip()],
            competencies=list(competencies_for_grade(session.grade_key)),
        )
        try:
            suggestions = await adapter.suggest(request, session)
        except SuggestionInProgressError:
            self.notifications.info("Đang xử lý yêu cầu AI trước đó, vui lòng đợi.")
            return False
        except AIQuotaExceededError:
            self.notifications.warning("AI đang quá tải (hết hạn mức), vui lòng thử lại sau.")
            return False
        except AISuggestionError as e:
            self.notifications.error(f"Lỗi khi gọi AI: {e}")
            return False

        if not suggestions:
            self.notifications.info("AI không đề xuất năng lực số nào cho bài học này.")
            return False
        # Applied to the lesson the request was built for, not the current selection.
        self._apply(session, lambda t: ops.apply_suggestions(
            t, lesson.id, [(s.code, s.reason) for s in suggestions]
        ))
        self.notifications.success(f"AI đã gợi ý {len(suggestions)} năng lực số.")
        return True

    async def rewrite_reason_with_ai(self, session: EditorSession, code: str, adapter) -> bool:
        lesson = self.active_lesson(session)
        if lesson is None or code not in lesson.mappings:
            return False
        request = RewriteRequest(
            lesson_title=lesson.title,
            subject=session.subject,
            grade=session.grade_key,
            yccd=[y for y in lesson.yccd if y.strip()],
            code=code,
            competency_text=competency_text(code, session.grade_key),
            current_reason=lesson.mappings[code].reason or "",
        )
        try:
            reason = await adapter.rewrite_reason(request, session)
        except SuggestionInProgressError:
            self.notifications.info("Đang xử lý yêu cầu AI trước đó, vui lòng đợi.")
            return False
        except AIQuotaExceededError:
            self.notifications.warning("AI đang quá tải (hết hạn mức), vui lòng thử lại sau.")
            return False
        except AISuggestionError as e:
            self.notifications.error(f"Lỗi khi gọi AI: {e}")
            return False
        return self._apply(session, lambda t: ops.set_mapping_reason(t, lesson.id, code, reason))
