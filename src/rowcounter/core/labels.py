"""Group-label extraction from serialized report attributes."""


def extract_group_label(raw: str, attribute: str, delimiter: str) -> str:
    """Return the canonical group label of a composite attribute value.

    Report exports serialize the attribute as ``group=A;tier=B`` (sometimes
    with the surrounding quotes and the attribute name kept), so the label
    is recovered by removing quotes, dropping a leading ``<attribute>=``
    and taking the first delimiter-separated field.

    Args:
        raw: Raw attribute value as found in the document.
        attribute: Attribute name (``group`` or ``measure``).
        delimiter: Field separator (``;`` or ``,``).

    Returns:
        The first field, possibly empty.

    Example:
        >>> extract_group_label('"group=A;x=1"', "group", ";")
        'A'
    """
    value = raw.replace('"', "").strip()
    value = value.removeprefix(f"{attribute}=")
    return value.split(delimiter, 1)[0]
