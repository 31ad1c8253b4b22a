"""Field validators shared by the domain models."""
from __future__ import annotations

from typing import Optional

from pydantic import AnyUrl, TypeAdapter

_url_adapter = TypeAdapter(AnyUrl)


def check_url(value: Optional[str]) -> Optional[str]:
    """Reject anything that is not an absolute URL; keep the original string."""
    if value is None:
        return None
    url = _url_adapter.validate_python(value)
    if not url.host:
        raise ValueError("URL must include a host")
    return value
