from datetime import date
from decimal import Decimal


def line(day=1, credit=None, debit=None, **kwargs):
    """Entry payload as the services accept it."""
    return {
        'date': date(2024, 3, day),
        'credit': Decimal(credit) if credit is not None else None,
        'debit': Decimal(debit) if debit is not None else None,
        **kwargs,
    }
