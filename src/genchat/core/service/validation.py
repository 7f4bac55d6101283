"""Required-field checks shared by the services."""

from genchat.core.exceptions import ValidationError


def require(**fields: str | None) -> None:
    """Raise ``ValidationError`` naming every missing or blank field."""
    missing = [name for name, value in fields.items() if not value or not value.strip()]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
