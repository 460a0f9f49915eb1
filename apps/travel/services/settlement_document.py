"""
Settlement document generator.

Draws the printable settlement sheet (termo de caixa viagem) of one box on
A4 pages with ReportLab: title, trip metadata in two columns, the ledger
table with totals, the opening balance, advances and final balance lines,
and a signature block.

The ledger is split into pages before anything is drawn. Every page keeps
room for the summary block at its bottom, so the summary always fits
after the last row and the page count depends only on the row count and
the page geometry. Pages that continue on the next one end with a
"continued" marker; the next page repeats the column headers.
"""

import io
import logging
from datetime import date as date_type
from decimal import Decimal
from typing import List, NamedTuple, Optional, Sequence, Tuple

from django.conf import settings
from django.utils import formats, timezone, translation
from django.utils.text import slugify
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from ..models import TravelCashBox
from .balances import compute_box_totals
from .exceptions import BoxNotFoundError, SettlementDocumentError

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 40

FONT = 'Helvetica'
FONT_BOLD = 'Helvetica-Bold'
TITLE_SIZE = 14
TEXT_SIZE = 10
TABLE_SIZE = 8

LINE_SPACING = 14
ROW_HEIGHT = 14
TABLE_HEADER_HEIGHT = 18

# Vertical space above the table.
FIRST_PAGE_HEADER_HEIGHT = 130
NEXT_PAGE_HEADER_HEIGHT = 30

# Totals row, three balance lines, place/date and signature.
SUMMARY_HEIGHT = 180

NOT_SPECIFIED = 'Não informado'
DASH = '-'
TRUNCATION_MARKER = '..'
CONTINUED_MARKER = 'Continua na próxima página...'

# (header, width, character budget)
COLUMNS = (
    ('Data', 58, None),
    ('Documento', 62, 10),
    ('Cliente/Forn.', 90, 16),
    ('Custo', 70, 12),
    ('Histórico', 105, 20),
    ('Entrada', 65, None),
    ('Saída', 65, None),
)
TABLE_WIDTH = sum(width for _, width, _ in COLUMNS)
TABLE_LEFT = (PAGE_WIDTH - TABLE_WIDTH) / 2

METADATA_BUDGET = 38


class SettlementDocument(NamedTuple):
    content: bytes
    filename: str
    page_count: int


# =============================================================================
# Formatting
# =============================================================================

def truncate(text: Optional[str], budget: int) -> str:
    """Cut text to ``budget`` characters plus '..'; blank renders '-'."""
    text = (text or '').strip()
    if not text:
        return DASH
    if len(text) <= budget:
        return text
    return text[:budget] + TRUNCATION_MARKER


def format_currency(value: Optional[Decimal], blank: str = DASH) -> str:
    """
    Render an amount as pt-BR currency.

    Example:
        >>> format_currency(Decimal('1234.5'))
        'R$ 1.234,50'
        >>> format_currency(None)
        '-'
    """
    if value is None or value == 0:
        return blank
    with translation.override('pt-br'):
        text = formats.number_format(
            abs(Decimal(value)), decimal_pos=2, use_l10n=True, force_grouping=True
        )
    if value < 0:
        return f"- R$ {text}"
    return f"R$ {text}"


def format_debit(value: Optional[Decimal]) -> str:
    """Debits carry a leading minus marker."""
    text = format_currency(value)
    if text == DASH:
        return text
    return f"- {text}"


def format_date(value: Optional[date_type]) -> str:
    if value is None:
        return DASH
    return value.strftime('%d/%m/%Y')


def format_long_date(value: date_type) -> str:
    """'19 de Outubro de 2026'"""
    with translation.override('pt-br'):
        return formats.date_format(value, 'DATE_FORMAT')


def build_filename(box: TravelCashBox) -> str:
    """caixa_<number>_<employee>_<destination>.pdf"""
    employee = slugify(box.employee.full_name) if box.employee_id else ''
    destination = slugify(box.destination or '')
    return 'caixa_{}_{}_{}.pdf'.format(
        box.box_number or box.pk,
        employee.replace('-', '_') or 'sem_funcionario',
        destination.replace('-', '_') or 'sem_destino',
    )


# =============================================================================
# Pagination
# =============================================================================

def page_capacities() -> Tuple[int, int]:
    """Rows that fit on the first page and on each following page."""
    bottom = MARGIN + SUMMARY_HEIGHT
    first_top = PAGE_HEIGHT - MARGIN - FIRST_PAGE_HEADER_HEIGHT - TABLE_HEADER_HEIGHT
    next_top = PAGE_HEIGHT - MARGIN - NEXT_PAGE_HEADER_HEIGHT - TABLE_HEADER_HEIGHT
    return (
        int((first_top - bottom) // ROW_HEIGHT),
        int((next_top - bottom) // ROW_HEIGHT),
    )


def resolve_capacities(rows_per_page: Optional[int] = None) -> Tuple[int, int]:
    """
    Capacities for the first and the following pages.

    ``rows_per_page`` can only shrink a page; rows that do not fit the page
    geometry always move to the next page.
    """
    first, following = page_capacities()
    if rows_per_page:
        return min(rows_per_page, first), min(rows_per_page, following)
    return first, following


def plan_pages(row_count: int, first_page_capacity: int, page_capacity: int) -> List[range]:
    """
    Split row indexes into pages.

    Always returns at least one page, so a box without entries still gets
    its header and summary.

    Example:
        >>> plan_pages(40, 20, 20)
        [range(0, 20), range(20, 40)]
    """
    if first_page_capacity < 1 or page_capacity < 1:
        raise ValueError("Page capacity must be at least one row")

    pages = [range(0, min(row_count, first_page_capacity))]
    start = pages[0].stop
    while start < row_count:
        stop = min(row_count, start + page_capacity)
        pages.append(range(start, stop))
        start = stop
    return pages


# =============================================================================
# Drawing
# =============================================================================

def _related_name(obj, attribute: str) -> str:
    if obj is None:
        return NOT_SPECIFIED
    return getattr(obj, attribute) or NOT_SPECIFIED


def _draw_title(pdf: canvas.Canvas, box: TravelCashBox, continued: bool) -> float:
    y = PAGE_HEIGHT - MARGIN - 10
    title = 'CAIXA VIAGEM' + (' (continuação)' if continued else '')
    pdf.setFont(FONT_BOLD, TITLE_SIZE)
    pdf.drawString(TABLE_LEFT, y, title)
    pdf.drawRightString(TABLE_LEFT + TABLE_WIDTH, y, f'Caixa Nº {box.box_number}')
    return y


def _draw_metadata(pdf: canvas.Canvas, box: TravelCashBox, y: float, issued_on: date_type) -> float:
    y -= LINE_SPACING * 2
    pdf.setFont(FONT_BOLD, TEXT_SIZE)
    pdf.drawString(TABLE_LEFT, y, 'INFORMAÇÕES DA VIAGEM')

    left = [
        ('Empresa', _related_name(box.company, 'name')),
        ('Data da Viagem', format_date(box.date)),
        ('Data de Emissão', format_date(issued_on)),
        ('Destino', box.destination or NOT_SPECIFIED),
    ]
    right = [
        ('Colaborador', _related_name(box.employee, 'full_name')),
        ('Veículo', _related_name(box.vehicle, 'label')),
        ('Observações', box.note or DASH),
    ]

    pdf.setFont(FONT, TEXT_SIZE)
    right_x = TABLE_LEFT + TABLE_WIDTH / 2
    for index in range(max(len(left), len(right))):
        y -= LINE_SPACING
        if index < len(left):
            label, value = left[index]
            pdf.drawString(TABLE_LEFT, y, f'{label}: {truncate(value, METADATA_BUDGET)}')
        if index < len(right):
            label, value = right[index]
            pdf.drawString(right_x, y, f'{label}: {truncate(value, METADATA_BUDGET)}')
    return y


def _draw_table_header(pdf: canvas.Canvas, top: float) -> float:
    """Draw the column headers with their top edge at ``top``."""
    bottom = top - TABLE_HEADER_HEIGHT
    pdf.setFont(FONT_BOLD, TABLE_SIZE)
    pdf.line(TABLE_LEFT, top, TABLE_LEFT + TABLE_WIDTH, top)

    x = TABLE_LEFT
    for header, width, _ in COLUMNS:
        pdf.drawCentredString(x + width / 2, bottom + 6, header)
        x += width

    pdf.line(TABLE_LEFT, bottom, TABLE_LEFT + TABLE_WIDTH, bottom)
    return bottom


def _entry_cells(entry) -> List[str]:
    cells = [format_date(entry.date)]
    for (_, _, budget), value in zip(
        COLUMNS[1:5],
        (entry.document_number, entry.counterparty, entry.cost_type, entry.description),
    ):
        cells.append(truncate(value, budget))
    cells.append(format_currency(entry.credit))
    cells.append(format_debit(entry.debit))
    return cells


def _draw_row(pdf: canvas.Canvas, cells: Sequence[str], top: float, bold: bool = False) -> float:
    baseline = top - ROW_HEIGHT + 4
    pdf.setFont(FONT_BOLD if bold else FONT, TABLE_SIZE)

    x = TABLE_LEFT
    for index, (text, (_, width, _)) in enumerate(zip(cells, COLUMNS)):
        if index >= 5 and text != DASH:
            pdf.drawRightString(x + width - 3, baseline, text)
        elif index >= 5:
            pdf.drawCentredString(x + width / 2, baseline, text)
        elif text:
            pdf.drawString(x + 3, baseline, text)
        x += width
    return top - ROW_HEIGHT


def _draw_continued_marker(pdf: canvas.Canvas, y: float) -> None:
    pdf.line(TABLE_LEFT, y, TABLE_LEFT + TABLE_WIDTH, y)
    pdf.setFont(FONT, TABLE_SIZE)
    pdf.drawRightString(TABLE_LEFT + TABLE_WIDTH, y - LINE_SPACING, CONTINUED_MARKER)


def _draw_summary(pdf: canvas.Canvas, box: TravelCashBox, y: float, issued_on: date_type) -> float:
    totals = compute_box_totals(box)
    final_balance = totals.closing(box.opening_balance)

    y = _draw_row(
        pdf,
        ['', '', '', '', 'TOTAL:', format_currency(totals.credits), format_debit(totals.debits)],
        y,
        bold=True,
    )
    pdf.line(TABLE_LEFT, y, TABLE_LEFT + TABLE_WIDTH, y)

    value_x = TABLE_LEFT + TABLE_WIDTH - 3
    label_x = TABLE_LEFT + sum(width for _, width, _ in COLUMNS[:4]) + 3
    lines = (
        ('Saldo anterior:', box.opening_balance, FONT),
        ('Total de adiantamentos:', totals.advances, FONT),
        ('SALDO FINAL:', final_balance, FONT_BOLD),
    )
    for label, value, font in lines:
        y -= LINE_SPACING
        pdf.setFont(font, TEXT_SIZE)
        pdf.drawString(label_x, y, label)
        pdf.drawRightString(value_x, y, format_currency(value, blank='R$ 0,00'))

    place = box.destination or settings.SETTLEMENT_SIGNATURE_CITY
    y -= LINE_SPACING * 3
    pdf.setFont(FONT, TEXT_SIZE)
    pdf.drawCentredString(PAGE_WIDTH / 2, y, f'{place}, {format_long_date(issued_on)}')

    y -= LINE_SPACING * 3
    pdf.line(PAGE_WIDTH / 2 - 125, y, PAGE_WIDTH / 2 + 125, y)
    y -= LINE_SPACING
    pdf.drawCentredString(PAGE_WIDTH / 2, y, 'Responsável')
    return y


def _render(
    box: TravelCashBox,
    entries: Sequence,
    pages: List[range],
    issued_on: date_type
) -> bytes:
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    pdf.setTitle(f'Caixa Viagem {box.box_number}')

    for page_index, rows in enumerate(pages):
        is_first = page_index == 0
        is_last = page_index == len(pages) - 1

        y = _draw_title(pdf, box, continued=not is_first)
        if is_first:
            y = _draw_metadata(pdf, box, y, issued_on)
            top = PAGE_HEIGHT - MARGIN - FIRST_PAGE_HEADER_HEIGHT
        else:
            top = PAGE_HEIGHT - MARGIN - NEXT_PAGE_HEADER_HEIGHT

        y = _draw_table_header(pdf, top)
        for index in rows:
            y = _draw_row(pdf, _entry_cells(entries[index]), y)

        if is_last:
            _draw_summary(pdf, box, y, issued_on)
        else:
            _draw_continued_marker(pdf, y)

        pdf.showPage()

    pdf.save()
    return buffer.getvalue()


def generate_settlement_document(
    *,
    box_id: int,
    rows_per_page: Optional[int] = None,
    issued_on: Optional[date_type] = None
) -> SettlementDocument:
    """
    Produce the settlement PDF of a box.

    Args:
        box_id: Box to print
        rows_per_page: Ledger rows per page, capped by what the page
            geometry holds; derived from the geometry when omitted
        issued_on: Issue date printed on the sheet (defaults to today)

    Returns:
        SettlementDocument with the PDF bytes, a suggested filename and
        the number of pages

    Raises:
        BoxNotFoundError: If no box has the id
        SettlementDocumentError: If layout fails; no partial output is
            returned
    """
    try:
        box = (
            TravelCashBox.objects
            .select_related('company', 'employee', 'vehicle')
            .prefetch_related('entries', 'advances')
            .get(pk=box_id)
        )
    except (TravelCashBox.DoesNotExist, ValueError):
        raise BoxNotFoundError(f"Travel cash box {box_id} not found")

    issued_on = issued_on or timezone.localdate()

    try:
        entries = list(box.entries.all())
        first_capacity, page_capacity = resolve_capacities(rows_per_page)
        pages = plan_pages(len(entries), first_capacity, page_capacity)

        content = _render(box, entries, pages, issued_on)
        filename = build_filename(box)
    except Exception as e:
        logger.exception("Settlement document failed for box %s", box_id)
        raise SettlementDocumentError(
            f"Could not generate the settlement document for box {box_id}"
        ) from e

    logger.info("Generated settlement document for box %s (%d page(s))", box_id, len(pages))
    return SettlementDocument(content=content, filename=filename, page_count=len(pages))
