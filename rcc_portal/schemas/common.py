from typing import Optional

from pydantic import HttpUrl, TypeAdapter, ValidationError

_url_adapter = TypeAdapter(HttpUrl)


def optional_url(value: Optional[str]) -> Optional[str]:
    """Blank means no link; anything else must be an http(s) URL."""
    if value is None:
        return None
    value = str(value).strip()
    if not value:
        return None
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        raise ValueError("Link inválido.")
    return value


def not_null(value):
    """Partial updates may omit a field but not clear a required one."""
    if value is None:
        raise ValueError("Este campo não pode ser vazio.")
    return value
