"""
Document Exporter

Pure transform from (subject, grade, topics, lesson, view mode) to a
self-contained Word-compatible document, plus the save side effect.
The exporter holds no state; the view mode is chosen by the caller.
"""

import logging
from pathlib import Path

from src.export import pl1, pl3, pl4
from src.export.base import (
    TEMPLATE_NAMES,
    ExportedDocument,
    ExportRequest,
    export_filename,
    orientation_for,
    wrap_document,
)
from src.schemas.base import ViewMode

logger = logging.getLogger(__name__)

RENDERERS = {
    ViewMode.PL1: pl1.render_body,
    ViewMode.PL3: pl3.render_body,
    ViewMode.PL4: pl4.render_body,
}


def render_document(request: ExportRequest) -> ExportedDocument:
    """Render the template selected by ``request.view_mode``."""
    view_mode = ViewMode(request.view_mode)
    orientation = orientation_for(view_mode)
    body = RENDERERS[view_mode](request)
    document = ExportedDocument(
        filename=export_filename(view_mode, request.subject, request.grade),
        html=wrap_document(TEMPLATE_NAMES[view_mode], orientation, body),
        orientation=orientation,
    )
    logger.info("Rendered %s (%d chars)", document.filename, len(document.html))
    return document


def save_document(document: ExportedDocument, directory: str | Path) -> Path:
    """Write the document payload into ``directory`` and return its path."""
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / document.filename
    path.write_bytes(document.payload())
    logger.info("Saved %s", path)
    return path
