"""
Shared pieces of the Word-compatible export templates: request/response
types, the page shell and small formatting helpers.
"""

import html
from dataclasses import dataclass

from src.schemas.base import ViewMode
from src.schemas.curriculum import Competency, Lesson, Topic

BOM = "\ufeff"
WORD_MIME_TYPE = "application/msword"

TEMPLATE_NAMES = {
    ViewMode.PL1: "Phu_luc_1_Ke_hoach_NLS",
    ViewMode.PL3: "Phu_luc_3_Ke_hoach_Day_hoc",
    ViewMode.PL4: "Phu_luc_4_KHBD_CV5512",
}

LANDSCAPE_SIZE = "29.7cm 21cm"
PORTRAIT_SIZE = "21cm 29.7cm"

STYLES = """
                @page Section1 {{ size: {page_size}; mso-page-orientation: {orientation}; margin: 2.0cm; }}
                div.Section1 {{ page:Section1; }}
                body {{ font-family: 'Times New Roman', serif; font-size: 13pt; line-height: 1.3; color: black; }}
                table {{ border-collapse: collapse; width: 100%; border: 1px solid black; margin-bottom: 15px; }}
                th, td {{ border: 1px solid black; padding: 6px; vertical-align: top; font-size: 13pt; font-family: 'Times New Roman', serif; }}
                .header-cell {{ background: #f1f5f9; font-weight: bold; text-align: center; text-transform: uppercase; }}
                .text-center {{ text-align: center; }}
                .font-bold {{ font-weight: bold; }}
                .italic {{ font-style: italic; }}
                .title-main {{ text-align: center; text-transform: uppercase; font-weight: bold; font-size: 14pt; margin-bottom: 5px; }}
                .subtitle {{ text-align: center; font-weight: bold; font-size: 13pt; margin-bottom: 20px; }}
                .cv5512-header {{ text-align: right; font-style: italic; margin-bottom: 10px; font-size: 11pt; }}
                .section-title {{ font-weight: bold; text-transform: uppercase; margin-top: 15px; margin-bottom: 5px; }}
                .activity-box {{ border: 1px solid #000; padding: 10px; margin-bottom: 10px; }}
                .nls-box {{ background-color: #f0fdfa; border: 1px dashed #0d9488; padding: 5px; margin-top: 5px; font-size: 12pt; }}
"""


@dataclass(frozen=True)
class ExportRequest:
    subject: str
    grade: str
    topics: list[Topic]
    view_mode: ViewMode
    competencies: tuple[Competency, ...] = ()
    lesson: Lesson | None = None


@dataclass(frozen=True)
class ExportedDocument:
    filename: str
    html: str
    orientation: str

    def payload(self) -> bytes:
        """File bytes: byte-order mark followed by the HTML, UTF-8 encoded."""
        return (BOM + self.html).encode("utf-8")


def esc(value: object) -> str:
    """Escape user-authored text for embedding in the document."""
    if value is None:
        return ""
    return html.escape(str(value), quote=False)


def semester_topics(topics: list[Topic], semester: int) -> list[Topic]:
    return [t for t in topics if t.effective_semester() == semester]


def semester_heading(semester: int) -> str:
    label = "I" if semester == 1 else "II"
    return f'<div style="font-weight:bold; margin-top:20px;">HỌC KÌ {label}</div>'


def title_block(title: str, subject: str, grade: str) -> str:
    return (
        f'<div class="title-main">{title}</div>'
        f'<div class="subtitle">Môn: {esc(subject)} - Khối: {esc(grade)}</div>'
    )


def orientation_for(view_mode: ViewMode) -> str:
    return "portrait" if view_mode == ViewMode.PL4 else "landscape"


def export_filename(view_mode: ViewMode, subject: str, grade: str) -> str:
    return f"{TEMPLATE_NAMES[view_mode]}_{subject}_L{grade}.doc"


def wrap_document(title: str, orientation: str, body: str) -> str:
    """Word-flavoured HTML page with print size and orientation directives."""
    page_size = LANDSCAPE_SIZE if orientation == "landscape" else PORTRAIT_SIZE
    styles = STYLES.format(page_size=page_size, orientation=orientation)
    return (
        "<html xmlns:o='urn:schemas-microsoft-com:office:office' "
        "xmlns:w='urn:schemas-microsoft-com:office:word' "
        "xmlns='http://www.w3.org/TR/REC-html40'>\n"
        f"<head><meta charset=\"utf-8\"><title>{title}</title>\n"
        f"<style>{styles}</style></head><body><div class=\"Section1\">\n"
        f"{body}</div></body></html>"
    )
