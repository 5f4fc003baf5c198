"""
Phụ lục 4: lesson plan in the CV5512 layout for the active lesson.

Activities come from the structured ``plan_data`` sections when present;
otherwise the raw ``activities`` fragment is embedded as-is.
"""

from src.export.base import ExportRequest, esc
from src.schemas.curriculum import Lesson, PlanSection

DEFAULT_EQUIPMENT = "Máy tính, máy chiếu."
NO_CONTENT = '<p style="text-align:center; font-style:italic;">(Chưa có nội dung chi tiết)</p>'
NO_COMPETENCIES = '<p style="margin-left:20px; font-style:italic;">Chưa chọn năng lực số tích hợp.</p>'


def _competency_list(lesson: Lesson, texts: dict[str, str]) -> str:
    codes = lesson.selected_codes()
    if not codes:
        return NO_COMPETENCIES
    items = "".join(
        f"<li><b>{esc(code)}:</b> {esc(texts.get(code, ''))}.<br>"
        f"<i>Minh chứng: {esc(lesson.mappings[code].reason)}</i></li>"
        for code in codes
    )
    return f'<ul style="margin-left:20px;">{items}</ul>'


def _header(request: ExportRequest, lesson: Lesson) -> str:
    texts = {c.code: c.text for c in request.competencies}
    yccd = "".join(f"<li>{esc(y)}</li>" for y in lesson.yccd)
    return f"""
<div class="cv5512-header">Phụ lục IV<br>KHUNG KẾ HOẠCH BÀI DẠY<br>(Kèm theo Công văn số 5512/BGDĐT-GDTrH)</div>
<div style="display:flex; justify-content:space-between; margin-bottom:20px;">
<div>Trường: ........................................<br>Tổ: .............................................</div>
<div>Họ và tên giáo viên:<br>.......................................................</div>
</div>
<div class="title-main">TÊN BÀI DẠY: {esc(lesson.title.upper())}</div>
<div class="text-center" style="margin-bottom:20px;">Môn học: {esc(request.subject)}; Lớp: {esc(request.grade)}<br>Thời gian thực hiện: {lesson.periods or 1} tiết</div>
<div class="section-title">I. MỤC TIÊU</div>
<div style="margin-left: 10px;">
<p><b>1. Về kiến thức:</b></p>
<ul style="margin-left: 20px;">{yccd}</ul>
<p><b>2. Về năng lực:</b></p>
<p style="margin-left: 20px;">- <b>Năng lực chung:</b> Tự chủ và tự học, Giao tiếp và hợp tác, Giải quyết vấn đề và sáng tạo.</p>
<p style="margin-left: 20px;">- <b>Năng lực riêng:</b> Nhận thức khoa học, Tìm hiểu tự nhiên, Vận dụng kiến thức.</p>
<p style="margin-left: 20px; text-decoration: underline;">- <b>Năng lực số (Tích hợp):</b></p>
{_competency_list(lesson, texts)}
<p><b>3. Về phẩm chất:</b></p>
<p style="margin-left: 20px;">Chăm chỉ, trung thực, trách nhiệm.</p>
</div>
<div class="section-title">II. THIẾT BỊ DẠY HỌC VÀ HỌC LIỆU</div>
<ul style="margin-left: 20px;">
<li>Thiết bị: {esc(lesson.equipment or DEFAULT_EQUIPMENT)}</li>
<li>Học liệu: SGK, phiếu học tập.</li>
</ul>
<div class="section-title">III. TIẾN TRÌNH DẠY HỌC</div>
"""


def _section(section: PlanSection) -> str:
    duration = f" ({esc(section.duration)} phút)" if section.duration else " ()"
    steps = []
    for step in section.steps:
        steps.append(f"<p><b>- {esc(step.title)}:</b> {esc(step.content)}</p>")
        if step.nls_codes:
            codes = ", ".join(esc(c) for c in step.nls_codes)
            steps.append(f'<div class="nls-box"><b>* Tích hợp NLS:</b> {codes}</div>')
    return (
        '<div class="activity-box">\n'
        f"<p><b>{esc(section.label)}. {esc(section.title)}</b>{duration}</p>\n"
        f"<p><b>a) Mục tiêu:</b> {esc(section.objective)}</p>\n"
        f"<p><b>b) Nội dung:</b> {esc(section.content)}</p>\n"
        f"<p><b>c) Sản phẩm:</b> {esc(section.product)}</p>\n"
        "<p><b>d) Tổ chức thực hiện:</b></p>\n"
        f'<div style="margin-left:15px;">{"".join(steps)}</div>\n'
        "</div>\n"
    )


def render_body(request: ExportRequest) -> str:
    lesson = request.lesson
    if lesson is None:
        return ""

    parts = [_header(request, lesson)]
    if lesson.plan_data:
        parts.extend(_section(s) for s in lesson.plan_data)
    elif lesson.activities:
        parts.append(lesson.activities)
    else:
        parts.append(NO_CONTENT)
    return "".join(parts)
