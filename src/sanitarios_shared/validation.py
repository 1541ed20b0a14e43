"""
Input validation utilities.
"""

import re
from datetime import date

PHONE_PATTERNS = (r"^\d{3}-\d{4}-\d{4}$", r"^\d{10,11}$")


class ValidationError(Exception):
    """Raised when validation fails."""

    pass


def validate_phone(phone: str) -> None:
    """Accept ``xxx-xxxx-xxxx`` or 10 to 11 digits."""
    if not phone:
        raise ValidationError("El teléfono es requerido")

    if not any(re.match(p, phone) for p in PHONE_PATTERNS):
        raise ValidationError(
            "Formato de teléfono incorrecto, debe ser xxx-xxxx-xxxx o tener entre 10 y 11 dígitos"
        )


def validate_iso_date(value: str, field_label: str = "fecha") -> date:
    if not value:
        raise ValidationError(f"La {field_label} es obligatoria")
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        raise ValidationError(f"Formato de {field_label} inválido") from None


def validate_date_range(start: str, end: str) -> None:
    """Both dates must parse and ``end`` cannot precede ``start``."""
    start_date = validate_iso_date(start, "fecha de inicio")
    end_date = validate_iso_date(end, "fecha de fin")
    if end_date < start_date:
        raise ValidationError("La fecha de fin no puede ser anterior a la fecha de inicio")


def validate_password(password: str) -> None:
    """
    Validate password strength for self-service password changes.

    Requirements:
    - At least 6 characters
    - At least one letter
    - At least one number
    """
    if not password:
        raise ValidationError("La contraseña es requerida")

    if len(password) < 6:
        raise ValidationError("La contraseña debe tener al menos 6 caracteres")

    if not re.search(r"[A-Za-z]", password):
        raise ValidationError("La contraseña debe tener al menos una letra")

    if not re.search(r"[0-9]", password):
        raise ValidationError("La contraseña debe tener al menos un número")


def validate_pagination(page: int | None, limit: int | None) -> tuple[int, int]:
    """
    Validate and normalize pagination parameters.

    Returns: (page, limit) tuple with validated values.
    """
    from sanitarios_shared.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

    if page is None or page < 1:
        page = 1

    if limit is None or limit < 1:
        limit = DEFAULT_PAGE_SIZE
    elif limit > MAX_PAGE_SIZE:
        limit = MAX_PAGE_SIZE

    return page, limit
