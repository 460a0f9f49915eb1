"""
Current account document generator.

Draws the printable term (termo de conta corrente) of one account on A4
pages with ReportLab. The layout rules are the travel settlement sheet's:
pages are planned before drawing, every page keeps room for the summary
block, and continued pages repeat the column headers.
"""

import io
import logging
from datetime import date as date_type
from typing import List, NamedTuple, Optional, Sequence, Tuple

from django.conf import settings
from django.utils import timezone
from django.utils.text import slugify
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from apps.travel.services.settlement_document import (
    CONTINUED_MARKER,
    DASH,
    FONT,
    FONT_BOLD,
    LINE_SPACING,
    MARGIN,
    NOT_SPECIFIED,
    ROW_HEIGHT,
    TABLE_HEADER_HEIGHT,
    TABLE_SIZE,
    TEXT_SIZE,
    TITLE_SIZE,
    format_currency,
    format_date,
    format_debit,
    format_long_date,
    plan_pages,
    truncate,
)
from ..models import CurrentAccount
from .account_management import compute_account_totals
from .exceptions import AccountNotFoundError, AccountDocumentError

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4

FIRST_PAGE_HEADER_HEIGHT = 130
NEXT_PAGE_HEADER_HEIGHT = 30
# TOTAL row, SALDO line, place/date and signature.
SUMMARY_HEIGHT = 150

# (header, width, character budget)
COLUMNS = (
    ('Data', 60, None),
    ('Documento', 90, 14),
    ('Observação', 175, 25),
    ('Crédito', 80, None),
    ('Débito', 80, None),
)
AMOUNT_COLUMNS = 3
TABLE_WIDTH = sum(width for _, width, _ in COLUMNS)
TABLE_LEFT = (PAGE_WIDTH - TABLE_WIDTH) / 2

INFO_BUDGET = 38


class AccountDocument(NamedTuple):
    content: bytes
    filename: str
    page_count: int


def build_filename(account: CurrentAccount) -> str:
    """conta_corrente_<id>_<counterparty>.pdf"""
    counterparty = slugify(account.counterparty or '').replace('-', '_')
    return f'conta_corrente_{account.pk}_{counterparty or "sem_fornecedor"}.pdf'


def page_capacities(rows_per_page: Optional[int] = None) -> Tuple[int, int]:
    """
    Rows that fit on the first page and on each following page.

    ``rows_per_page`` can only shrink a page.
    """
    bottom = MARGIN + SUMMARY_HEIGHT
    first_top = PAGE_HEIGHT - MARGIN - FIRST_PAGE_HEADER_HEIGHT - TABLE_HEADER_HEIGHT
    next_top = PAGE_HEIGHT - MARGIN - NEXT_PAGE_HEADER_HEIGHT - TABLE_HEADER_HEIGHT
    first = int((first_top - bottom) // ROW_HEIGHT)
    following = int((next_top - bottom) // ROW_HEIGHT)
    if rows_per_page:
        return min(rows_per_page, first), min(rows_per_page, following)
    return first, following


def _label(obj, attribute: str) -> str:
    if obj is None:
        return NOT_SPECIFIED
    return getattr(obj, attribute) or NOT_SPECIFIED


def _draw_title(pdf: canvas.Canvas, account: CurrentAccount, continued: bool) -> float:
    y = PAGE_HEIGHT - MARGIN - 10
    pdf.setFont(FONT_BOLD, TITLE_SIZE)
    pdf.drawString(TABLE_LEFT, y, 'CONTA CORRENTE' + (' (continuação)' if continued else ''))
    pdf.drawRightString(TABLE_LEFT + TABLE_WIDTH, y, f'ID {account.pk}')
    return y


def _draw_info(pdf: canvas.Canvas, account: CurrentAccount, y: float) -> float:
    y -= LINE_SPACING * 2
    pdf.setFont(FONT_BOLD, TEXT_SIZE)
    pdf.drawString(TABLE_LEFT, y, 'INFORMAÇÕES DA CONTA')

    left = [
        ('Fornecedor/Cliente', account.counterparty or NOT_SPECIFIED),
        ('Empresa', _label(account.company, 'name')),
        ('Tipo', account.get_kind_display()),
        ('Setor', account.sector or NOT_SPECIFIED),
    ]
    right = [
        ('Data', format_date(account.date)),
        ('Colaborador', _label(account.employee, 'full_name')),
        ('Responsável', account.owner.get_full_name() or account.owner.email),
        ('Observação', account.note or DASH),
    ]

    pdf.setFont(FONT, TEXT_SIZE)
    right_x = TABLE_LEFT + TABLE_WIDTH / 2
    for (left_label, left_value), (right_label, right_value) in zip(left, right):
        y -= LINE_SPACING
        pdf.drawString(TABLE_LEFT, y, f'{left_label}: {truncate(left_value, INFO_BUDGET)}')
        pdf.drawString(right_x, y, f'{right_label}: {truncate(right_value, INFO_BUDGET)}')
    return y


def _draw_table_header(pdf: canvas.Canvas, top: float) -> float:
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
    return [
        format_date(entry.date),
        truncate(entry.document_number, COLUMNS[1][2]),
        truncate(entry.note, COLUMNS[2][2]),
        format_currency(entry.credit),
        format_debit(entry.debit),
    ]


def _draw_row(pdf: canvas.Canvas, cells: Sequence[str], top: float, bold: bool = False) -> float:
    baseline = top - ROW_HEIGHT + 4
    pdf.setFont(FONT_BOLD if bold else FONT, TABLE_SIZE)

    x = TABLE_LEFT
    for index, (text, (_, width, _)) in enumerate(zip(cells, COLUMNS)):
        if index >= AMOUNT_COLUMNS and text != DASH:
            pdf.drawRightString(x + width - 3, baseline, text)
        elif index >= AMOUNT_COLUMNS:
            pdf.drawCentredString(x + width / 2, baseline, text)
        elif text:
            pdf.drawString(x + 3, baseline, text)
        x += width
    return top - ROW_HEIGHT


def _draw_summary(pdf: canvas.Canvas, account: CurrentAccount, y: float, issued_on: date_type) -> float:
    totals = compute_account_totals(account)

    y = _draw_row(
        pdf,
        ['', '', 'TOTAL:', format_currency(totals.credits), format_debit(totals.debits)],
        y,
        bold=True,
    )
    pdf.line(TABLE_LEFT, y, TABLE_LEFT + TABLE_WIDTH, y)

    y -= LINE_SPACING
    pdf.setFont(FONT_BOLD, TEXT_SIZE)
    pdf.drawString(TABLE_LEFT + sum(width for _, width, _ in COLUMNS[:2]) + 3, y, 'SALDO:')
    pdf.drawRightString(
        TABLE_LEFT + TABLE_WIDTH - 3, y,
        format_currency(totals.balance, blank='R$ 0,00')
    )

    y -= LINE_SPACING * 3
    pdf.setFont(FONT, TEXT_SIZE)
    pdf.drawCentredString(
        PAGE_WIDTH / 2, y,
        f'{settings.SETTLEMENT_SIGNATURE_CITY}, {format_long_date(issued_on)}'
    )

    y -= LINE_SPACING * 3
    pdf.line(PAGE_WIDTH / 2 - 125, y, PAGE_WIDTH / 2 + 125, y)
    y -= LINE_SPACING
    pdf.drawCentredString(PAGE_WIDTH / 2, y, 'Assinatura')
    return y


def _render(
    account: CurrentAccount,
    entries: Sequence,
    pages: List[range],
    issued_on: date_type
) -> bytes:
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    pdf.setTitle(f'Conta Corrente {account.pk}')

    for page_index, rows in enumerate(pages):
        is_first = page_index == 0
        is_last = page_index == len(pages) - 1

        y = _draw_title(pdf, account, continued=not is_first)
        if is_first:
            _draw_info(pdf, account, y)
            top = PAGE_HEIGHT - MARGIN - FIRST_PAGE_HEADER_HEIGHT
        else:
            top = PAGE_HEIGHT - MARGIN - NEXT_PAGE_HEADER_HEIGHT

        y = _draw_table_header(pdf, top)
        for index in rows:
            y = _draw_row(pdf, _entry_cells(entries[index]), y)

        if is_last:
            _draw_summary(pdf, account, y, issued_on)
        else:
            pdf.line(TABLE_LEFT, y, TABLE_LEFT + TABLE_WIDTH, y)
            pdf.setFont(FONT, TABLE_SIZE)
            pdf.drawRightString(TABLE_LEFT + TABLE_WIDTH, y - LINE_SPACING, CONTINUED_MARKER)

        pdf.showPage()

    pdf.save()
    return buffer.getvalue()


def generate_account_document(
    *,
    account_id: int,
    rows_per_page: Optional[int] = None,
    issued_on: Optional[date_type] = None
) -> AccountDocument:
    """
    Produce the PDF term of a current account.

    Raises:
        AccountNotFoundError: If no account has the id
        AccountDocumentError: If layout fails; no partial output is
            returned
    """
    try:
        account = (
            CurrentAccount.objects
            .select_related('owner', 'company', 'employee')
            .prefetch_related('entries')
            .get(pk=account_id)
        )
    except (CurrentAccount.DoesNotExist, ValueError):
        raise AccountNotFoundError(f"Current account {account_id} not found")

    issued_on = issued_on or timezone.localdate()

    try:
        entries = list(account.entries.all())
        pages = plan_pages(len(entries), *page_capacities(rows_per_page))
        content = _render(account, entries, pages, issued_on)
        filename = build_filename(account)
    except Exception as e:
        logger.exception("Account document failed for account %s", account_id)
        raise AccountDocumentError(
            f"Could not generate the document for current account {account_id}"
        ) from e

    logger.info("Generated document for current account %s (%d page(s))", account_id, len(pages))
    return AccountDocument(content=content, filename=filename, page_count=len(pages))
