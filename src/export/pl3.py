"""
Phụ lục 3: schedule plan.

One table per semester. The week counter advances by each lesson's period
count and is raised to at least week 19 when semester 2 starts (the first
semester is 18 weeks). Unlike Phụ lục 1, the sequence number restarts in
each semester.
"""

from src.export.base import ExportRequest, esc, semester_heading, semester_topics, title_block

TITLE = "KẾ HOẠCH DẠY HỌC MÔN HỌC (PHỤ LỤC 3)"
SEMESTER_2_FIRST_WEEK = 19

TABLE_HEAD = (
    '<table><thead><tr>'
    '<th class="header-cell">STT</th>'
    '<th class="header-cell">Bài dạy / Nội dung</th>'
    '<th class="header-cell">Số tiết</th>'
    '<th class="header-cell">Thời điểm</th>'
    '<th class="header-cell">Thiết bị dạy học</th>'
    '<th class="header-cell">Địa điểm</th>'
    '<th class="header-cell">NLS Tích hợp</th>'
    '</tr></thead><tbody>'
)


def week_range(start: int, periods: int) -> str:
    if periods <= 1:
        return f"Tuần {start}"
    return f"Tuần {start} - {start + periods - 1}"


def render_body(request: ExportRequest) -> str:
    parts = [title_block(TITLE, request.subject, request.grade)]
    week = 1
    for semester in (1, 2):
        topics = semester_topics(request.topics, semester)
        if not topics:
            continue
        if semester == 2:
            week = max(week, SEMESTER_2_FIRST_WEEK)
        stt = 1
        parts.append(semester_heading(semester))
        parts.append(TABLE_HEAD)
        for topic in topics:
            parts.append(
                f'<tr><td colspan="7" style="background:#f8fafc; font-weight:bold;">{esc(topic.topic)}</td></tr>'
            )
            for lesson in topic.lessons:
                periods = lesson.effective_periods()
                weeks = week_range(week, periods)
                week += periods
                codes = ", ".join(esc(c) for c in lesson.selected_codes())
                parts.append(
                    f'<tr><td class="text-center">{stt}</td><td>{esc(lesson.title)}</td>'
                    f'<td class="text-center">{periods}</td><td class="text-center font-bold">{weeks}</td>'
                    f'<td>{esc(lesson.equipment or "")}</td><td>{esc(lesson.location or "")}</td>'
                    f'<td class="text-center">{codes}</td></tr>'
                )
                stt += 1
        parts.append("</tbody></table>")
    return "\n".join(parts) + "\n"
