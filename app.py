"""
EduPlan NLS
Streamlit interface for integrating digital competencies (NLS) into
lesson plans and exporting Phụ lục 1/3/4.

Run with: streamlit run app.py
"""

import asyncio
import logging

import streamlit as st
import streamlit.components.v1 as components

from config.settings import DATABASE_URL, SUBJECTS
from src.ai.suggestion import SuggestionAdapter
from src.curriculum.context import all_lessons
from src.curriculum.store import CurriculumStore
from src.curriculum.usage import other_usages
from src.export.base import WORD_MIME_TYPE
from src.registry.competencies import competencies_for_grade
from src.schemas.base import ALL_GRADES, CoverageStatus, NotificationLevel, ViewMode
from src.schemas.session import EditorSession
from src.storage.blob_store import BlobStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Page config - must be first
st.set_page_config(
    page_title="EduPlan NLS",
    page_icon="📘",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .stApp { background-color: #f8fafc; }
    section[data-testid="stSidebar"] { background-color: #ffffff; border-right: 1px solid #e2e8f0; }
    h1, h2, h3 { color: #1e293b; font-weight: 700; }
    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}
</style>
""", unsafe_allow_html=True)

VIEW_LABELS = {
    ViewMode.PL1: "Phụ lục 1 - Kế hoạch NLS",
    ViewMode.PL3: "Phụ lục 3 - Kế hoạch dạy học",
    ViewMode.PL4: "Phụ lục 4 - KHBD CV5512",
}

STATUS_ICONS = {
    CoverageStatus.COVERED: "✅",
    CoverageStatus.WEAK: "🟡",
    CoverageStatus.MISSING: "❌",
}


# --- PROVISIONING ---
@st.cache_resource
def get_store() -> CurriculumStore:
    """Initialize the store (cached for the process)."""
    db_url = st.secrets.get("DATABASE_URL") if "DATABASE_URL" in st.secrets else DATABASE_URL
    return CurriculumStore(BlobStore(db_url))


@st.cache_resource
def get_adapter() -> SuggestionAdapter:
    return SuggestionAdapter()


def get_session() -> EditorSession:
    if "editor" not in st.session_state:
        st.session_state["editor"] = EditorSession()
    return st.session_state["editor"]


def show_notifications(store: CurriculumStore):
    """Toast every active notification once."""
    shown = st.session_state.setdefault("shown_notifications", set())
    icons = {
        NotificationLevel.SUCCESS: "✅",
        NotificationLevel.INFO: "ℹ️",
        NotificationLevel.WARNING: "⚠️",
        NotificationLevel.ERROR: "❌",
    }
    for n in store.notifications.active():
        if n.id in shown:
            continue
        st.toast(n.message, icon=icons[n.level])
        shown.add(n.id)


# --- SIDEBAR ---
def render_sidebar(store: CurriculumStore, session: EditorSession) -> str:
    with st.sidebar:
        st.markdown("### EduPlan **NLS**")
        st.caption("Tích hợp năng lực số vào kế hoạch dạy học")
        st.markdown("---")

        subject = st.selectbox("Môn học", SUBJECTS, index=SUBJECTS.index(session.subject))
        if subject != session.subject:
            session.switch_subject(subject)

        grade = st.radio("Khối lớp", ALL_GRADES, index=ALL_GRADES.index(session.grade_key), horizontal=True)
        if grade != session.grade_key:
            session.switch_grade(grade)

        modes = list(ViewMode)
        view = st.radio(
            "Mẫu tài liệu", modes,
            index=modes.index(session.view_mode),
            format_func=lambda m: VIEW_LABELS[m],
        )
        session.view_mode = view
        st.markdown("---")

        app_mode = st.radio("Chức năng", ["Soạn thảo", "Xem & xuất file", "Ma trận NLS", "Sao lưu"])
        st.markdown("---")

        topics = store.session_topics(session)
        lessons = all_lessons(topics)
        if lessons:
            ids = [None] + [l.id for l in lessons]
            titles = {l.id: l.title for l in lessons}
            current = session.lesson_id if session.lesson_id in titles else None
            picked = st.selectbox(
                "Bài học", ids,
                index=ids.index(current),
                format_func=lambda i: "-- Chọn bài học --" if i is None else titles[i],
            )
            if picked != session.lesson_id:
                session.select_lesson(picked)
        else:
            st.info("Khối lớp này chưa có bài học.")

        col_a, col_b = st.columns(2)
        if col_a.button("➕ Bài học", use_container_width=True):
            store.add_lesson(session)
            st.rerun()
        if col_b.button("➕ Chủ đề", use_container_width=True):
            store.add_topic(session)
            st.rerun()

        with st.expander("Trạng thái AI"):
            stats = get_adapter().client.get_usage_stats()
            if not stats["configured"]:
                st.warning("Chưa cấu hình GOOGLE_API_KEY.")
            for model_name, calls in stats["daily_calls"].items():
                st.caption(f"{model_name}: {calls} lượt gọi hôm nay")
    return app_mode


# --- EDITOR ---
def render_structure(store: CurriculumStore, session: EditorSession):
    topics = store.session_topics(session)
    for ti, topic in enumerate(topics):
        with st.expander(f"HK{topic.effective_semester()} • {topic.topic}", expanded=False):
            c1, c2, c3, c4, c5 = st.columns([4, 1, 1, 1, 1])
            title = c1.text_input("Tên chủ đề", topic.topic, key=f"topic_{ti}")
            if title != topic.topic:
                store.rename_topic(session, ti, title)
                st.rerun()
            semester = c2.selectbox("HK", [1, 2], index=topic.effective_semester() - 1, key=f"sem_{ti}")
            if semester != topic.effective_semester():
                store.set_topic_semester(session, ti, semester)
                st.rerun()
            if c3.button("⬆", key=f"tup_{ti}"):
                store.move_topic(session, ti, -1)
                st.rerun()
            if c4.button("⬇", key=f"tdown_{ti}"):
                store.move_topic(session, ti, 1)
                st.rerun()
            if c5.button("🗑", key=f"tdel_{ti}"):
                store.delete_topic(session, ti)
                st.rerun()

            for lesson in topic.lessons:
                l1, l2, l3, l4, l5 = st.columns([5, 1, 1, 1, 1])
                l1.write(f"{lesson.title} ({lesson.effective_periods()} tiết)")
                if l2.button("✏️", key=f"open_{lesson.id}"):
                    session.select_lesson(lesson.id)
                    st.rerun()
                if l3.button("⬆", key=f"up_{lesson.id}"):
                    store.move_lesson(session, lesson.id, -1)
                    st.rerun()
                if l4.button("⬇", key=f"down_{lesson.id}"):
                    store.move_lesson(session, lesson.id, 1)
                    st.rerun()
                if l5.button("🗑", key=f"del_{lesson.id}"):
                    store.delete_lesson(session, lesson.id)
                    st.rerun()

    with st.expander("Áp dụng cho toàn bộ kế hoạch"):
        field = st.selectbox(
            "Trường", ["equipment", "location", "periods"],
            format_func=lambda f: {"equipment": "Thiết bị", "location": "Địa điểm", "periods": "Số tiết"}[f],
        )
        value = st.number_input("Giá trị", min_value=1, value=2) if field == "periods" else st.text_input("Giá trị")
        if st.button("Áp dụng", type="primary"):
            store.bulk_update_field(session, field, value)
            st.rerun()


def render_lesson_editor(store: CurriculumStore, session: EditorSession):
    lesson = store.active_lesson(session)
    if lesson is None:
        st.info("Chọn một bài học trong thanh bên để chỉnh sửa.")
        return

    st.subheader(lesson.title)
    with st.container(border=True):
        title = st.text_input("Tên bài học", lesson.title)
        c1, c2, c3 = st.columns(3)
        periods = c1.number_input("Số tiết", min_value=1, value=lesson.effective_periods())
        equipment = c2.text_input("Thiết bị", lesson.equipment or "")
        location = c3.text_input("Địa điểm", lesson.location or "")
        if st.button("💾 Lưu thông tin bài học"):
            store.update_active_lesson(
                session, title=title, periods=int(periods), equipment=equipment, location=location
            )
            st.rerun()

    st.markdown("#### Yêu cầu cần đạt")
    for i, item in enumerate(lesson.yccd):
        y1, y2 = st.columns([10, 1])
        value = y1.text_input(f"YCCĐ {i + 1}", item, key=f"yccd_{lesson.id}_{i}", label_visibility="collapsed")
        if value != item:
            store.update_yccd(session, i, value)
            st.rerun()
        if y2.button("✖", key=f"yccd_del_{lesson.id}_{i}"):
            store.delete_yccd(session, i)
            st.rerun()
    if st.button("➕ Thêm yêu cầu"):
        store.add_yccd(session)
        st.rerun()

    s1, s2, s3 = st.columns(3)
    if s1.button("✂️ Tách bài", use_container_width=True):
        store.split_lesson(session)
        st.rerun()
    if s2.button("⤒ Gộp bài trước", use_container_width=True, disabled=not store.can_merge_previous(session)):
        store.merge_previous(session)
        st.rerun()
    if s3.button("⤓ Gộp bài sau", use_container_width=True, disabled=not store.can_merge_next(session)):
        store.merge_next(session)
        st.rerun()

    render_competency_picker(store, session)


def render_competency_picker(store: CurriculumStore, session: EditorSession):
    lesson = store.active_lesson(session)
    st.markdown("#### Năng lực số tích hợp")

    f1, f2 = st.columns([3, 1])
    session.filter_mode = f1.toggle("Chỉ hiện năng lực đã chọn", value=session.filter_mode)
    if f2.button("✨ Gợi ý AI", type="primary", disabled=session.ai_loading, use_container_width=True):
        with st.spinner("AI đang phân tích bài học..."):
            asyncio.run(store.suggest_for_active_lesson(session, get_adapter()))
        st.rerun()

    usage = store.usage_index(session)
    for competency in competencies_for_grade(session.grade_key):
        mapping = lesson.mappings.get(competency.code)
        selected = bool(mapping and mapping.selected)
        if session.filter_mode and not selected:
            continue
        with st.container(border=True):
            checked = st.checkbox(
                f"**{competency.code}** {competency.text}",
                value=selected,
                key=f"map_{lesson.id}_{competency.code}",
            )
            if checked != selected:
                store.set_mapping(session, competency.code, checked)
                st.rerun()
            elsewhere = other_usages(usage, competency.code)
            if elsewhere:
                st.caption("Đã dùng ở: " + "; ".join(f"Lớp {u.grade}: {u.lesson_title}" for u in elsewhere))
            if selected:
                reason = st.text_area(
                    "Minh chứng", mapping.reason or "", key=f"reason_{lesson.id}_{competency.code}"
                )
                r1, r2 = st.columns(2)
                if r1.button("Lưu minh chứng", key=f"save_reason_{lesson.id}_{competency.code}"):
                    store.set_mapping_reason(session, competency.code, reason)
                    st.rerun()
                if r2.button("✨ Viết lại bằng AI", key=f"ai_reason_{lesson.id}_{competency.code}",
                             disabled=session.ai_loading):
                    with st.spinner("AI đang viết lại..."):
                        asyncio.run(store.rewrite_reason_with_ai(session, competency.code, get_adapter()))
                    st.rerun()


# --- DOCUMENT VIEW ---
def render_document_view(store: CurriculumStore, session: EditorSession):
    if session.view_mode == ViewMode.PL4 and store.active_lesson(session) is None:
        st.info("Phụ lục 4 cần chọn một bài học.")
    document = store.render_document(session)
    st.download_button(
        "📥 Tải file Word",
        document.payload(),
        file_name=document.filename,
        mime=WORD_MIME_TYPE,
        type="primary",
        on_click=lambda: store.notifications.success("Đã xuất file Word thành công!"),
    )
    components.html(document.html, height=800, scrolling=True)


# --- GAP MATRIX ---
def render_matrix(store: CurriculumStore, session: EditorSession):
    st.subheader(f"Ma trận năng lực số - {session.subject}")
    gaps = store.gaps(session)
    cols = st.columns(len(gaps))
    for col, (grade, cells) in zip(cols, gaps.items()):
        col.metric(f"Lớp {grade}", f"{len(cells)} lỗ hổng")
    for row in store.coverage_matrix(session):
        with st.expander(f"Lớp {row.grade} • bao phủ {row.coverage_ratio:.0%}", expanded=row.grade == session.grade_key):
            for cell in row.cells:
                c1, c2 = st.columns([6, 2])
                c1.markdown(f"{STATUS_ICONS[cell.status]} **{cell.competency.code}** {cell.competency.text}")
                if cell.lesson_titles:
                    c1.caption("; ".join(cell.lesson_titles))
                if cell.status != CoverageStatus.COVERED and c2.button(
                    "➕ Hoạt động bổ trợ", key=f"gap_{row.grade}_{cell.competency.code}"
                ):
                    store.add_supplementary_lesson(
                        session.subject, row.grade,
                        f"Hoạt động bổ trợ: {cell.competency.code}", cell.competency.code,
                    )
                    st.rerun()


# --- BACKUP ---
def render_backup(store: CurriculumStore, session: EditorSession):
    st.subheader("Sao lưu & khôi phục")
    st.download_button(
        "📥 Tải bản sao lưu (JSON)",
        store.export_json(),
        file_name="eduplan_backup.json",
        mime="application/json",
    )
    uploaded = st.file_uploader("Khôi phục từ file JSON", type=["json"])
    if uploaded is not None and st.button("Khôi phục toàn bộ dữ liệu"):
        store.import_json(uploaded.getvalue())
        st.rerun()

    st.markdown("---")
    confirmed = st.checkbox(f"Tôi xác nhận muốn khôi phục dữ liệu mặc định cho môn {session.subject}")
    if st.button("♻️ Khôi phục mặc định"):
        store.reset_subject(session, confirmed=confirmed)
        st.rerun()


def main_dashboard():
    store = get_store()
    session = get_session()
    app_mode = render_sidebar(store, session)

    if app_mode == "Soạn thảo":
        render_structure(store, session)
        st.markdown("---")
        render_lesson_editor(store, session)
    elif app_mode == "Xem & xuất file":
        render_document_view(store, session)
    elif app_mode == "Ma trận NLS":
        render_matrix(store, session)
    else:
        render_backup(store, session)

    show_notifications(store)


if __name__ == "__main__":
    main_dashboard()
