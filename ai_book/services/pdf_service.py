# ai_book/services/pdf_service.py
import io
import logging
import os
import re
import time
import unicodedata
from typing import List, Optional, Tuple
from xml.sax.saxutils import escape

import arabic_reshaper
from bidi import get_display
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import A4, LETTER
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont, TTFError
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer

from ..core.config import config
from ..core.utils import DateTimeUtils
from ..models.session import ExamSession

logger = logging.getLogger(__name__)

PAGE_SIZES = {"A4": A4, "LETTER": LETTER}

FONT_NAME = "AIBookSans"
BOLD_FONT_NAME = "AIBookSans-Bold"

_HEADING = re.compile(r"^(#{1,6})\s+(.*)$")
_BULLET = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+(.*)$")

def resolve_font_path() -> Optional[str]:
    """Configured font, else the first Unicode font found on the system"""
    if config.PDF_FONT_PATH:
        return config.PDF_FONT_PATH
    for candidate in config.PDF_FONT_CANDIDATES:
        if os.path.isfile(candidate):
            return candidate
    return None

def shape_text(text: str) -> str:
    """Join Arabic letter forms and reorder right-to-left runs for drawing"""
    return get_display(arabic_reshaper.reshape(text))

def is_rtl(text: str) -> bool:
    """True when the first strongly directional character is right-to-left"""
    for char in text:
        direction = unicodedata.bidirectional(char)
        if direction in ("R", "AL"):
            return True
        if direction == "L":
            return False
    return False

def _inline(text: str) -> str:
    """Escape markup and keep **bold** emphasis"""
    text = escape(text)
    return re.sub(r"\*\*(.+?)\*\*", r"<b>\1</b>", text)

class PDFService:
    """reportlab exports for project plans and graded exams"""

    def __init__(self):
        self.font_name, self.bold_font_name = self._register_fonts()

        self.styles = getSampleStyleSheet()
        for name, style in self.styles.byName.items():
            is_heading = name.startswith("Heading") or name == "Title"
            style.fontName = self.bold_font_name if is_heading else self.font_name
        self.styles["Title"].fontSize = config.PDF_TITLE_FONT_SIZE

        self.body = ParagraphStyle(
            "AIBookBody",
            parent=self.styles["Normal"],
            fontName=self.font_name,
            fontSize=config.PDF_FONT_SIZE,
            leading=config.PDF_FONT_SIZE + 4
        )

    def _register_fonts(self) -> Tuple[str, str]:
        """Register the Unicode TTF fonts, or fall back to Helvetica"""
        font_path = resolve_font_path()
        if not font_path:
            logger.warning("No Unicode font found; set PDF_FONT_PATH or Arabic text will not render")
            return "Helvetica", "Helvetica-Bold"

        bold_path = config.PDF_BOLD_FONT_PATH or font_path
        try:
            pdfmetrics.registerFont(TTFont(FONT_NAME, font_path))
            pdfmetrics.registerFont(TTFont(BOLD_FONT_NAME, bold_path))
        except (TTFError, OSError) as e:
            logger.error(f"❌ Could not load PDF font {font_path}: {e}")
            return "Helvetica", "Helvetica-Bold"

        pdfmetrics.registerFontFamily(
            FONT_NAME,
            normal=FONT_NAME,
            bold=BOLD_FONT_NAME,
            italic=FONT_NAME,
            boldItalic=BOLD_FONT_NAME
        )
        logger.info(f"✅ PDF font registered: {font_path}")
        return FONT_NAME, BOLD_FONT_NAME

    def _paragraph(self, text: str, style: ParagraphStyle, prefix: str = "") -> Paragraph:
        """Paragraph of plain text, shaped for right-to-left scripts"""
        if is_rtl(text):
            style = ParagraphStyle(f"{style.name}-rtl", parent=style, alignment=TA_RIGHT)
        return Paragraph(prefix + _inline(shape_text(text)), style)

    def _build(self, story: List) -> bytes:
        pdf_buffer = io.BytesIO()
        doc = SimpleDocTemplate(pdf_buffer, pagesize=PAGE_SIZES.get(config.PDF_PAGE_SIZE.upper(), A4))
        doc.build(story)
        pdf_buffer.seek(0)
        return pdf_buffer.read()

    def _generated_on(self) -> Paragraph:
        stamp = DateTimeUtils.format_timestamp(time.time(), "%Y-%m-%d %H:%M")
        return self._paragraph(f"{config.SITE_NAME} - generated {stamp}", self.styles["Italic"])

    def generate_plan_pdf(self, plan_markdown: str, title: str = "Project Plan") -> bytes:
        """Render a Markdown project plan"""
        if not plan_markdown or not plan_markdown.strip():
            raise ValueError("Project plan is empty")

        try:
            story = [self._paragraph(title, self.styles["Title"]), self._generated_on(), Spacer(1, 12)]

            for line in plan_markdown.splitlines():
                if not line.strip():
                    story.append(Spacer(1, 6))
                    continue

                heading = _HEADING.match(line.strip())
                bullet = _BULLET.match(line)
                if heading:
                    level = min(len(heading.group(1)) + 1, 4)
                    story.append(self._paragraph(heading.group(2), self.styles[f"Heading{level}"]))
                elif bullet:
                    story.append(self._paragraph(bullet.group(1), self.body, prefix="• "))
                else:
                    story.append(self._paragraph(line.strip(), self.body))

            return self._build(story)

        except Exception as e:
            logger.error(f"❌ PDF generation error: {e}")
            raise RuntimeError(f"PDF generation failed: {e}")

    def generate_exam_pdf(self, session: ExamSession) -> bytes:
        """Render a graded exam with answers and corrections"""
        summary = session.summary()
        if summary is None:
            raise ValueError("Exam must be submitted before exporting")

        try:
            story = [
                self._paragraph(session.exam.title, self.styles["Title"]),
                self._generated_on(),
                Spacer(1, 12),
                self._paragraph(
                    f"Final score: {summary.score} / {summary.total} ({summary.percentage}%)",
                    self.styles["Heading2"]
                ),
                Spacer(1, 12)
            ]

            for view in session.question_views():
                story.append(self._paragraph(f"{view.number}. {view.question_text}", self.styles["Heading4"]))
                if view.choices:
                    story.append(self._paragraph(" / ".join(view.choices), self.body))

                answer = view.answer if view.answer is not None else "(no answer)"
                story.append(self._paragraph(f"Your answer: {answer}", self.body))

                if view.is_correct:
                    story.append(self._paragraph("**Correct!**", self.body))
                else:
                    story.append(self._paragraph(f"**Correct answer:** {view.revealed_answer or ''}", self.body))
                story.append(Spacer(1, 8))

            return self._build(story)

        except Exception as e:
            logger.error(f"❌ PDF generation error: {e}")
            raise RuntimeError(f"PDF generation failed: {e}")

_pdf_service = None

def get_pdf_service() -> PDFService:
    """Get PDF service instance (singleton)"""
    global _pdf_service
    if _pdf_service is None:
        _pdf_service = PDFService()
    return _pdf_service
