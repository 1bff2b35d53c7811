"""
Workout plan PDF rendering.

Layout is fixed-coordinate on A4 pages with 50pt margins. Positions below are
expressed top-down (0 = top edge) like the rest of the app's layout constants
and converted to reportlab's bottom-up space when drawing.

Known limitation: exercise cards are not measured. A new page starts only when
a card's top would pass PAGE_BREAK_Y, so long notes can run past a card and
pages are not tightly packed.
"""

import os
import threading
import time
import uuid
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional
from xml.sax.saxutils import escape

from reportlab.lib.colors import HexColor
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph

logger = logging.getLogger(__name__)

BRAND = "MeuCoach"
DISCLAIMER = (
    "Este plano de treino foi gerado pelo aplicativo MeuCoach. "
    "Para mais informações, entre em contato com seu treinador."
)

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 50
CONTENT_WIDTH = 500

INFO_ROWS_Y = 215
DESCRIPTION_LABEL_Y = INFO_ROWS_Y + 85
DESCRIPTION_Y = INFO_ROWS_Y + 105
DESCRIPTION_MAX_HEIGHT = 300
EXERCISES_Y = 350
CARD_HEIGHT = 100
CARD_SPACING = 120
BADGE_WIDTH = 40
PAGE_BREAK_Y = 700
FOOTER_BOTTOM = 800
DEFAULT_CLEANUP_DELAY = 5 * 60

PRIMARY = HexColor("#3B82F6")
TEXT = HexColor("#0F172A")
MUTED = HexColor("#64748B")
FAINT = HexColor("#94A3B8")
RULE = HexColor("#E2E8F0")
CARD = HexColor("#F8FAFC")
WHITE = HexColor("#FFFFFF")

_DESCRIPTION_STYLE = ParagraphStyle(
    "description", fontName="Helvetica", fontSize=12, leading=15,
    textColor=TEXT, alignment=TA_JUSTIFY,
)
_NOTES_STYLE = ParagraphStyle(
    "notes", fontName="Helvetica", fontSize=12, leading=15, textColor=MUTED,
)
_FOOTER_STYLE = ParagraphStyle(
    "footer", fontName="Helvetica", fontSize=10, leading=12,
    textColor=FAINT, alignment=TA_CENTER,
)

TITLE_FONT_SIZE = 24
TITLE_MIN_FONT_SIZE = 14


@dataclass
class CardPlacement:
    ordinal: int
    name: str
    page: int
    top: float


@dataclass
class FooterStamp:
    page: int
    label: str
    disclaimer: str
    disclaimer_width: float


@dataclass
class RenderedLayout:
    page_count: int = 0
    title: str = ""
    title_font_size: float = TITLE_FONT_SIZE
    info_separator_y: float = 0
    exercises_heading_y: float = 0
    cards: List[CardPlacement] = field(default_factory=list)
    footers: List[FooterStamp] = field(default_factory=list)


class _BufferedCanvas(canvas.Canvas):
    """Canvas that holds every page until save() so each footer can say "N of M"."""

    def __init__(self, *args, footer: Callable[["_BufferedCanvas", int, int], "FooterStamp"], **kwargs):
        super().__init__(*args, **kwargs)
        self._footer = footer
        self._saved_pages: List[Dict[str, Any]] = []
        self.stamps: List[FooterStamp] = []

    def showPage(self):
        self._saved_pages.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        # The page being drawn has not been pushed by showPage() yet
        self._saved_pages.append(dict(self.__dict__))
        total = len(self._saved_pages)
        stamps = []
        for number, state in enumerate(self._saved_pages, start=1):
            self.__dict__.update(state)
            stamps.append(self._footer(self, number, total))
            super().showPage()
        self.stamps = stamps
        super().save()

    @property
    def page_count(self) -> int:
        return len(self._saved_pages)


def _field(obj: Any, key: str, default: Any = "") -> Any:
    if isinstance(obj, Mapping):
        value = obj.get(key, default)
    else:
        value = getattr(obj, key, default)
    return default if value is None else value


class WorkoutPDFRenderer:
    def __init__(self, brand: str = BRAND, disclaimer: str = DISCLAIMER):
        self.brand = brand
        self.disclaimer = disclaimer

    def render(self, workout: Any, user: Any, file_path: str) -> RenderedLayout:
        """Draw the whole plan into file_path. The file is complete when this returns."""
        layout = RenderedLayout()
        doc = _BufferedCanvas(file_path, pagesize=A4, footer=self._draw_footer)
        doc.setTitle(f"Treino - {_field(workout, 'name')}")
        doc.setAuthor(f"{self.brand} App")
        doc.setSubject("Plano de Treino Personalizado")

        layout.title, layout.title_font_size = self._draw_header(doc, workout, user)
        layout.info_separator_y = self._draw_workout_info(doc, workout)
        layout.exercises_heading_y = max(EXERCISES_Y, layout.info_separator_y + 20)
        self._draw_exercises(doc, _field(workout, "exercises", []) or [], layout)

        doc.save()
        layout.page_count = doc.page_count
        layout.footers = doc.stamps
        return layout

    # Coordinate helpers (top-down -> reportlab bottom-up)

    @staticmethod
    def _text(doc, x: float, top: float, text: str, size: float, color, font: str = "Helvetica"):
        doc.setFont(font, size)
        doc.setFillColor(color)
        doc.drawString(x, PAGE_HEIGHT - top - size, text)

    @staticmethod
    def _rule(doc, top: float):
        doc.setStrokeColor(RULE)
        doc.line(MARGIN, PAGE_HEIGHT - top, MARGIN + CONTENT_WIDTH, PAGE_HEIGHT - top)

    @staticmethod
    def _box(doc, x: float, top: float, width: float, height: float, color):
        doc.setFillColor(color)
        doc.rect(x, PAGE_HEIGHT - top - height, width, height, stroke=0, fill=1)

    @staticmethod
    def _paragraph(doc, text: str, x: float, top: float, width: float, style: ParagraphStyle,
                   max_height: Optional[float] = None) -> float:
        para = Paragraph(escape(str(text)).replace("\n", "<br/>"), style)
        _, height = para.wrap(width, PAGE_HEIGHT)
        if max_height is not None and height > max_height:
            parts = para.split(width, max_height)
            if parts:
                para = parts[0]
                _, height = para.wrap(width, max_height)
        para.drawOn(doc, x, PAGE_HEIGHT - top - height)
        return height

    # Sections

    @staticmethod
    def _fit_title(text: str) -> tuple:
        """Shrink the title down to TITLE_MIN_FONT_SIZE, then truncate, so it stays within the margins."""
        size = TITLE_FONT_SIZE
        while size > TITLE_MIN_FONT_SIZE and stringWidth(text, "Helvetica", size) > CONTENT_WIDTH:
            size -= 1
        if stringWidth(text, "Helvetica", size) > CONTENT_WIDTH:
            while text and stringWidth(text + "...", "Helvetica", size) > CONTENT_WIDTH:
                text = text[:-1]
            text = text.rstrip() + "..."
        return text, size

    def _draw_header(self, doc, workout: Any, user: Any) -> tuple:
        """Draw the header block and return the title as drawn with its font size."""
        self._text(doc, MARGIN, 50, self.brand, 20, PRIMARY)

        title, size = self._fit_title(f"Treino: {_field(workout, 'name')}")
        doc.setFont("Helvetica", size)
        doc.setFillColor(TEXT)
        doc.drawCentredString(PAGE_WIDTH / 2, PAGE_HEIGHT - 85 - size, title)

        self._text(doc, MARGIN, 120, f"Preparado para: {_field(user, 'name')}", 12, MUTED)
        self._text(doc, MARGIN, 140, f"Data: {datetime.now().strftime('%d/%m/%Y')}", 12, MUTED)
        self._rule(doc, 165)
        return title, size

    def _draw_workout_info(self, doc, workout: Any) -> float:
        """Draw the info block and return the y of the separator under it."""
        self._text(doc, MARGIN, 185, "Informações do Treino", 14, TEXT)

        rows = [
            ("Categoria:", str(_field(workout, "category"))),
            ("Dificuldade:", str(_field(workout, "difficulty"))),
            ("Duração:", f"{_field(workout, 'duration')} minutos"),
        ]
        for offset, (label, value) in enumerate(rows):
            self._text(doc, MARGIN, INFO_ROWS_Y + offset * 25, label, 12, MUTED)
            self._text(doc, 150, INFO_ROWS_Y + offset * 25, value, 12, TEXT)

        description = _field(workout, "description")
        if not description:
            line_y = DESCRIPTION_LABEL_Y
        else:
            self._text(doc, MARGIN, DESCRIPTION_LABEL_Y, "Descrição:", 12, MUTED)
            height = self._paragraph(
                doc, description, MARGIN, DESCRIPTION_Y, CONTENT_WIDTH,
                _DESCRIPTION_STYLE, max_height=DESCRIPTION_MAX_HEIGHT,
            )
            line_y = DESCRIPTION_Y + height + 20

        self._rule(doc, line_y)
        return line_y

    def _draw_exercises(self, doc, exercises: List[Any], layout: RenderedLayout):
        current_y = layout.exercises_heading_y
        self._text(doc, MARGIN, current_y, "Exercícios", 16, TEXT)
        current_y += 30
        page = 1

        for index, exercise in enumerate(exercises):
            if current_y > PAGE_BREAK_Y:
                doc.showPage()
                page += 1
                current_y = 50

            ordinal = index + 1
            name = str(_field(exercise, "name"))

            self._box(doc, MARGIN, current_y, CONTENT_WIDTH, CARD_HEIGHT, CARD)
            self._box(doc, MARGIN, current_y, BADGE_WIDTH, CARD_HEIGHT, PRIMARY)
            doc.setFont("Helvetica", 18)
            doc.setFillColor(WHITE)
            doc.drawCentredString(MARGIN + BADGE_WIDTH / 2, PAGE_HEIGHT - current_y - 40 - 18, str(ordinal))

            self._text(doc, 100, current_y + 15, name, 14, TEXT)
            self._text(doc, 100, current_y + 40, f"Séries: {_field(exercise, 'sets')}", 12, MUTED)
            self._text(doc, 230, current_y + 40, f"Repetições: {_field(exercise, 'reps')}", 12, MUTED)
            self._text(doc, 370, current_y + 40, f"Descanso: {_field(exercise, 'rest_seconds')}s", 12, MUTED)

            notes = _field(exercise, "notes")
            if notes:
                self._paragraph(doc, f"Observações: {notes}", 100, current_y + 65, 430, _NOTES_STYLE)

            layout.cards.append(CardPlacement(ordinal=ordinal, name=name, page=page, top=current_y))
            current_y += CARD_SPACING

    def _draw_footer(self, doc, number: int, total: int) -> FooterStamp:
        self._rule(doc, FOOTER_BOTTOM - 50)

        disclaimer = Paragraph(escape(self.disclaimer), _FOOTER_STYLE)
        _, height = disclaimer.wrap(CONTENT_WIDTH, FOOTER_BOTTOM - 40)
        disclaimer.drawOn(doc, MARGIN, PAGE_HEIGHT - (FOOTER_BOTTOM - 40) - height)

        label = f"Página {number} de {total}"
        doc.setFont("Helvetica", 10)
        doc.setFillColor(FAINT)
        doc.drawRightString(MARGIN + CONTENT_WIDTH, PAGE_HEIGHT - (FOOTER_BOTTOM - 15) - 10, label)
        return FooterStamp(
            page=number,
            label=label,
            disclaimer=self.disclaimer,
            disclaimer_width=max(disclaimer.getActualLineWidths0() or [0]),
        )


def build_pdf_filename(workout_id: Any) -> str:
    """treino_<workout id>_<ns timestamp>_<random>.pdf, unique even for simultaneous calls."""
    return f"treino_{workout_id}_{time.time_ns()}_{uuid.uuid4().hex[:8]}.pdf"


def generate_workout_pdf(
    workout: Any,
    user: Any,
    output_dir: str,
    renderer: Optional[WorkoutPDFRenderer] = None,
) -> str:
    """Render the plan to a new file in output_dir and return its path.

    The caller owns the file (see cleanup_pdf). On failure the partial file is
    removed and the error re-raised.
    """
    os.makedirs(output_dir, exist_ok=True)
    file_path = os.path.join(output_dir, build_pdf_filename(_field(workout, "id")))
    renderer = renderer or WorkoutPDFRenderer()
    try:
        layout = renderer.render(workout, user, file_path)
    except Exception as e:
        logger.error(f"Failed to write workout PDF {file_path}: {str(e)}")
        _remove_file(file_path)
        raise
    logger.info(f"Generated {file_path} ({len(layout.cards)} exercises, {layout.page_count} pages)")
    return file_path


def _remove_file(file_path: str) -> bool:
    try:
        os.remove(file_path)
        logger.debug(f"Removed {file_path}")
        return True
    except FileNotFoundError:
        return False


def cleanup_pdf(file_path: str, delay: float = DEFAULT_CLEANUP_DELAY) -> Optional[threading.Timer]:
    """Delete file_path after delay seconds (immediately when delay <= 0).

    A file that is already gone is ignored.
    """
    if delay <= 0:
        _remove_file(file_path)
        return None
    timer = threading.Timer(delay, _remove_file, args=(file_path,))
    timer.daemon = True
    timer.start()
    return timer
