"""
Image extension helpers.
"""


def normalize_extension(extension: str) -> str:
    """
    Normalize extension to lower-case with a leading dot.

    Examples:
        >>> normalize_extension("PNG")
        '.png'
        >>> normalize_extension(" .Jpg ")
        '.jpg'
        >>> normalize_extension("")
        ''
    """
    ext = extension.strip().lower()
    if ext and not ext.startswith("."):
        ext = f".{ext}"
    return ext
