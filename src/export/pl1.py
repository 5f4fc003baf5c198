"""
Phụ lục 1: integrated digital-competency plan.

One table per semester. Period numbers and the sequence number run
continuously across the whole grade, both semesters included.
"""

from src.export.base import ExportRequest, esc, semester_heading, semester_topics, title_block

TITLE = "KẾ HOẠCH DẠY HỌC TÍCH HỢP NĂNG LỰC SỐ (PHỤ LỤC 1)"

TABLE_HEAD = (
    '<table><thead><tr>'
    '<th class="header-cell" style="width:5%">STT</th>'
    '<th class="header-cell" style="width:25%">Bài học</th>'
    '<th class="header-cell" style="width:10%">Tiết</th>'
    '<th class="header-cell" style="width:10%">Số tiết</th>'
    '<th class="header-cell" style="width:35%">Yêu cầu cần đạt</th>'
    '<th class="header-cell" style="width:15%">NLS</th>'
    '</tr></thead><tbody>'
)


def period_range(start: int, count: int) -> str:
    """'n' for a single period, 'a - b' otherwise."""
    if count == 1:
        return f"{start}"
    return f"{start} - {start + count - 1}"


def render_body(request: ExportRequest) -> str:
    parts = [title_block(TITLE, request.subject, request.grade)]
    period = 1
    stt = 1
    for semester in (1, 2):
        topics = semester_topics(request.topics, semester)
        if not topics:
            continue
        parts.append(semester_heading(semester))
        parts.append(TABLE_HEAD)
        for topic in topics:
            parts.append(
                f'<tr><td colspan="6" style="background:#f8fafc; font-weight:bold;">{esc(topic.topic)}</td></tr>'
            )
            for lesson in topic.lessons:
                count = lesson.effective_periods()
                periods = period_range(period, count)
                period += count
                codes = "<br>".join(esc(c) for c in lesson.selected_codes())
                yccd = "<br>".join(f"- {esc(y)}" for y in lesson.yccd)
                parts.append(
                    f'<tr><td class="text-center">{stt}</td><td>{esc(lesson.title)}</td>'
                    f'<td class="text-center">{periods}</td><td class="text-center">{count}</td>'
                    f'<td>{yccd}</td><td class="text-center font-bold">{codes}</td></tr>'
                )
                stt += 1
        parts.append("</tbody></table>")
    return "\n".join(parts) + "\n"
