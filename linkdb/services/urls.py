from urllib.parse import urlsplit

from pydantic import HttpUrl, TypeAdapter, ValidationError

_HTTP_SCHEMES = ("http", "https")
_http_url = TypeAdapter(HttpUrl)


def is_absolute_url(value: str) -> bool:
    """Return True for a well-formed absolute http(s) URL with a host."""
    if not value or any(char.isspace() for char in value):
        return False
    try:
        _http_url.validate_python(value)
        parts = urlsplit(value)
        parts.port  # raises ValueError on a malformed port
    except (ValidationError, ValueError):
        return False
    return parts.scheme.lower() in _HTTP_SCHEMES and bool(parts.hostname)


def _origin(base_url: str) -> tuple[str, str]:
    parts = urlsplit(base_url)
    if not parts.scheme or not parts.hostname:
        raise ValueError(f"not an absolute URL: {base_url!r}")
    host = parts.hostname
    if ":" in host:
        host = f"[{host}]"
    if parts.port is not None:
        host = f"{host}:{parts.port}"
    return parts.scheme.lower(), f"{parts.scheme.lower()}://{host}"


def absolutize(candidate: str, base_url: str) -> str:
    """Resolve an image candidate against the page it was found on.

    Scheme-relative values take the page scheme, root-relative values take the
    page origin, and bare relative paths are joined to the origin root rather
    than the page directory. Values that already carry an http(s) scheme are
    returned unchanged, as is everything when ``base_url`` is malformed.
    """
    if not candidate or candidate.lower().startswith(("http://", "https://")):
        return candidate
    try:
        scheme, origin = _origin(base_url)
    except ValueError:
        return candidate
    if candidate.startswith("//"):
        return f"{scheme}:{candidate}"
    if candidate.startswith("/"):
        return f"{origin}{candidate}"
    return f"{origin}/{candidate}"
