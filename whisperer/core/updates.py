# whisperer/core/updates.py
from typing import Dict, Optional

from pydantic import BaseModel

from whisperer.core.exceptions import ValidationFailedError


def collect_updates(
    payload: BaseModel,
    model,
    empty_message: str = "No valid fields provided.",
    renames: Optional[Dict[str, str]] = None,
) -> dict:
    """
    The fields a PATCH body actually sent, keyed by column name.

    An empty body is a 400, and so is an explicit null for a column that
    cannot hold one.
    """
    updates = payload.model_dump(exclude_unset=True)
    if not updates:
        raise ValidationFailedError(empty_message)

    for field, column_name in (renames or {}).items():
        if field in updates:
            updates[column_name] = updates.pop(field)

    columns = model.__table__.columns
    for key, value in updates.items():
        if value is None and key in columns and not columns[key].nullable:
            raise ValidationFailedError(f"{key} cannot be null.")
    return updates
