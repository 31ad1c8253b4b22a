"""Helpers shared by the service classes."""
from __future__ import annotations

import logging
from typing import Optional, TypeVar

from pydantic import BaseModel, ValidationError

from socialapi.errors import ValidationFailedError

M = TypeVar("M", bound=BaseModel)


class BaseService:
    """Holds the injected logger; services never log through module globals."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.log = logger or logging.getLogger(type(self).__module__)


def validated(model: type[M], **fields) -> M:
    """Build ``model`` from ``fields`` or raise ValidationFailedError."""
    try:
        return model(**fields)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise ValidationFailedError(f"validation failed: {problems}") from exc
