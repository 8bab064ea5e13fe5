from ..models.pixel import PixelLike


class PixelService:
    """
    Per-pixel comparison logic. Stateless and safe to share between threads.
    """

    @staticmethod
    def is_wildcard(pixel: PixelLike) -> bool:
        """A fully transparent needle pixel matches anything."""
        return pixel.a == 0

    @staticmethod
    def difference(left: PixelLike, right: PixelLike) -> float:
        """
        Squared Euclidean distance between two pixels seen as (R, G, B, A) vectors.
        No square root: callers compare against squared thresholds.
        """
        dr = float(left.r) - float(right.r)
        dg = float(left.g) - float(right.g)
        db = float(left.b) - float(right.b)
        da = float(left.a) - float(right.a)
        return dr * dr + dg * dg + db * db + da * da

    def is_close(self, left: PixelLike, right: PixelLike, tolerance_squared: int) -> bool:
        if left == right:
            return True
        return tolerance_squared > 0 and self.difference(left, right) <= tolerance_squared


def difference(left: PixelLike, right: PixelLike) -> float:
    return PixelService.difference(left, right)
