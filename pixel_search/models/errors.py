class SizeMismatchError(ValueError):
    """
    Raised when a buffer's width * height does not equal its pixel count.
    """


class GeometryError(ValueError):
    """
    Raised before scanning when needle, haystack and clip rectangle
    cannot be placed inside each other.
    """
