from core.errors import ConfigurationError


def normalize_base_url(base_url: str) -> str:
    """Strip whitespace and one trailing slash so suffixes join cleanly."""
    value = str(base_url or "").strip()
    if not value:
        raise ConfigurationError("Base URL cannot be empty.")
    if value.endswith("/"):
        value = value[:-1]
    if not value:
        raise ConfigurationError("Base URL cannot be empty.")
    return value


def join_endpoint(base_url: str, path: str) -> str:
    if not path:
        return base_url
    return f"{base_url}{path if path.startswith('/') else '/' + path}"
