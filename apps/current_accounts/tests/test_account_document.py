"""
Tests for the current account document generator.
"""

import re
import pytest
from datetime import date
from unittest.mock import patch
from reportlab.pdfgen.canvas import Canvas

from apps.current_accounts.services import account_document
from apps.current_accounts.services import generate_account_document
from apps.current_accounts.services.exceptions import AccountNotFoundError, AccountDocumentError
from apps.current_accounts.services.account_document import page_capacities, MARGIN
from .helpers import line

PAGE_OBJECT = re.compile(rb'/Type /Page(?!s)')


def drawn_strings(account_id, positions=None, **kwargs):
    """Generate a document and collect every string drawn on it."""
    drawn = []
    methods = ('drawString', 'drawRightString', 'drawCentredString')
    originals = {name: getattr(Canvas, name) for name in methods}

    def recorder(name):
        def record(self, x, y, text, *args, **kw):
            drawn.append(text)
            if positions is not None:
                positions.append(y)
            return originals[name](self, x, y, text, *args, **kw)
        return record

    with patch.object(Canvas, 'drawString', recorder('drawString')), \
            patch.object(Canvas, 'drawRightString', recorder('drawRightString')), \
            patch.object(Canvas, 'drawCentredString', recorder('drawCentredString')):
        document = generate_account_document(account_id=account_id, **kwargs)
    return document, drawn


class TestPageCapacities:

    def test_following_pages_hold_more_rows(self):
        first, following = page_capacities()

        assert 0 < first < following

    def test_requested_capacity_only_shrinks_pages(self):
        first, following = page_capacities()

        assert page_capacities(5) == (5, 5)
        assert page_capacities(1000) == (first, following)


@pytest.mark.django_db
class TestAccountDocument:

    def test_single_page(self, make_account, employee, company):
        account = make_account(
            counterparty='Posto Central',
            sector='Frota',
            company=company,
            employee=employee,
            entries=[line(credit='1234.50', document_number='NF 1'), line(debit='34.50')],
        )

        document, drawn = drawn_strings(account.pk, issued_on=date(2024, 3, 20))

        assert document.page_count == 1
        assert document.content.startswith(b'%PDF')
        assert len(PAGE_OBJECT.findall(document.content)) == 1
        assert document.filename == f'conta_corrente_{account.pk}_posto_central.pdf'
        assert 'CONTA CORRENTE' in drawn
        assert 'Fornecedor/Cliente: Posto Central' in drawn
        assert 'Colaborador: João Silva' in drawn
        assert 'Tipo: Pessoal' in drawn
        assert 'R$ 1.234,50' in drawn
        assert 'SALDO:' in drawn
        assert 'R$ 1.200,00' in drawn

    def test_missing_fields_fall_back(self, make_account):
        account = make_account()

        _, drawn = drawn_strings(account.pk)

        assert 'Fornecedor/Cliente: Não informado' in drawn
        assert 'Empresa: Não informado' in drawn
        assert 'R$ 0,00' in drawn

    def test_long_note_is_truncated(self, make_account):
        account = make_account(entries=[line(credit='1.00', note='Abastecimento completo do caminhão baú')])

        _, drawn = drawn_strings(account.pk)

        assert 'Abastecimento completo do..' in drawn

    def test_continued_pages(self, make_account):
        first, following = page_capacities()
        account = make_account(entries=[line(credit='1.00') for _ in range(first + 1)])

        document, drawn = drawn_strings(account.pk)

        assert document.page_count == 2
        assert len(PAGE_OBJECT.findall(document.content)) == 2
        assert drawn.count('Continua na próxima página...') == 1
        assert 'CONTA CORRENTE (continuação)' in drawn
        assert drawn.count('Observação') == 2

    def test_oversized_rows_per_page_stays_on_paper(self, make_account):
        account = make_account(entries=[line(credit='1.00') for _ in range(60)])
        positions = []

        document, _ = drawn_strings(account.pk, positions=positions, rows_per_page=60)

        assert document.page_count == 2
        assert min(positions) >= MARGIN

    def test_missing_account(self, db):
        with pytest.raises(AccountNotFoundError):
            generate_account_document(account_id=999999)

    def test_layout_failure(self, make_account):
        account = make_account()

        with patch.object(account_document, '_render', side_effect=RuntimeError('boom')):
            with pytest.raises(AccountDocumentError):
                generate_account_document(account_id=account.pk)
