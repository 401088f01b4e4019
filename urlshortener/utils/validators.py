from pydantic import AnyUrl, TypeAdapter, ValidationError

MIN_CUSTOM_ID_LENGTH = 1
MAX_CUSTOM_ID_LENGTH = 50

_url_adapter = TypeAdapter(AnyUrl)


def is_valid_url(url) -> bool:
    """Check that `url` is an absolute URL with a scheme and an authority.

    Only the structure is checked, the host is never resolved.
    """
    if not url or not isinstance(url, str):
        return False

    try:
        parsed = _url_adapter.validate_python(url)
    except ValidationError:
        return False

    # AnyUrl also accepts authority-less URLs such as mailto:
    return bool(parsed.host)


def is_valid_custom_id(custom_id: str) -> bool:
    # Counted in characters, not encoded bytes
    return MIN_CUSTOM_ID_LENGTH <= len(custom_id) <= MAX_CUSTOM_ID_LENGTH
