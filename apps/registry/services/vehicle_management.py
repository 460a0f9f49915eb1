"""Vehicle registry operations."""

from typing import Optional

from django.db import transaction
from django.db.models import Q, QuerySet

from ..models import Vehicle
from .exceptions import DuplicateVehicleError

VEHICLE_FIELDS = ('name', 'model', 'plate')


def _normalize_plate(plate: str) -> str:
    return plate.replace('-', '').replace(' ', '').upper()


def _check_plate(plate: str, exclude_id: Optional[int] = None) -> None:
    if not plate:
        return
    existing = Vehicle.objects.filter(plate=plate, is_hidden=False)
    if exclude_id is not None:
        existing = existing.exclude(pk=exclude_id)
    if existing.exists():
        raise DuplicateVehicleError(f"A vehicle with plate {plate} already exists")


@transaction.atomic
def create_vehicle(*, name: str, model: str = '', plate: str = '') -> Vehicle:
    """
    Register a vehicle. Plates are stored upper-case without separators.

    Raises:
        DuplicateVehicleError: If a visible vehicle already uses the plate
    """
    plate = _normalize_plate(plate)
    _check_plate(plate)
    return Vehicle.objects.create(name=name, model=model, plate=plate)


@transaction.atomic
def update_vehicle(*, vehicle: Vehicle, **fields) -> Vehicle:
    """Update editable vehicle fields."""
    if 'plate' in fields:
        fields['plate'] = _normalize_plate(fields['plate'])
        _check_plate(fields['plate'], exclude_id=vehicle.pk)

    changed = []
    for name in VEHICLE_FIELDS:
        if name in fields:
            setattr(vehicle, name, fields[name])
            changed.append(name)

    if changed:
        vehicle.save(update_fields=changed + ['updated_at'])
    return vehicle


def search_vehicles(*, search: Optional[str] = None, show_hidden: bool = False) -> QuerySet:
    """Vehicles matching name, model or plate."""
    queryset = Vehicle.objects.all()
    if not show_hidden:
        queryset = queryset.filter(is_hidden=False)
    if search:
        queryset = queryset.filter(
            Q(name__icontains=search) |
            Q(model__icontains=search) |
            Q(plate__icontains=search.replace('-', '').upper())
        )
    return queryset
