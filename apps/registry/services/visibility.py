"""Soft delete for registry records."""

import logging

from django.db import transaction
from django.db.models import Model

from .exceptions import RecordNotFoundError

logger = logging.getLogger(__name__)


@transaction.atomic
def set_record_visibility(*, model: type, record_id: int, hidden: bool) -> Model:
    """
    Hide or show a company, employee or vehicle.

    Records are never deleted; travel cash boxes keep pointing at them.

    Raises:
        RecordNotFoundError: If no record has the id
    """
    try:
        record = model.objects.select_for_update().get(pk=record_id)
    except (model.DoesNotExist, ValueError):
        raise RecordNotFoundError(f"{model.__name__} {record_id} not found")

    if record.is_hidden != hidden:
        record.is_hidden = hidden
        record.save(update_fields=['is_hidden', 'updated_at'])
        logger.info(
            "%s %s is now %s",
            model.__name__, record.pk, 'hidden' if hidden else 'visible'
        )
    return record
