from datetime import date
from decimal import Decimal


def entry(credit=None, debit=None, **kwargs):
    """Ledger entry payload for the service layer."""
    data = {
        'date': date(2024, 3, 1),
        'description': 'Lançamento',
        'credit': Decimal(credit) if credit is not None else None,
        'debit': Decimal(debit) if debit is not None else None,
    }
    data.update(kwargs)
    return data
