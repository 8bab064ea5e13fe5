from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
import logging
import os
import threading

from dotenv import load_dotenv

from ..models.clip_region import ClipRegion
from ..models.errors import GeometryError
from ..models.match_location import MatchLocation
from ..models.pixel_buffer import PixelBuffer
from ..models.search_options import SearchOptions
from .pixel_service import PixelService

logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()

MAX_CHANNEL_VALUE = 255

# Absorbs binary representation error so that e.g. (29 / 100) * 100 truncates to 29.
_TRUNCATION_EPSILON = 1e-9


def _truncate(value: float) -> int:
    return int(value + _TRUNCATION_EPSILON)


class PixelSearchService:
    """
    Sliding-window search of a needle buffer inside a haystack buffer.

    *   Pure computation over read-only views: no locks, no I/O.
    *   Scans top-left offsets in reading order and returns the first match.
    *   With workers > 1, rows are split into bands scanned on a thread pool;
        the smallest (y, x) wins, so results equal the sequential scan. A band
        stops as soon as a band above it has a hit. The scan is pure Python and
        holds the GIL, so the threads do not make the scan faster.
    """

    def __init__(self, workers: int | None = None):
        if workers is None:
            workers = int(os.getenv("SEARCH_WORKERS", "1"))
        self.workers = max(1, workers)
        self.pixel_service = PixelService()

    # ─── Public API ──────────────────────────────────────────────────
    def find_pixels(
        self,
        needle: PixelBuffer,
        haystack: PixelBuffer,
        options: SearchOptions | None = None,
        clip: ClipRegion | None = None,
    ) -> MatchLocation:
        """
        Find the first window of *haystack* matching *needle*.

        Any needle pixel with 0 alpha is a wildcard. Both buffers must be row-major.

        Args:
            needle (PixelBuffer): The pattern to look for.
            haystack (PixelBuffer): The buffer searched.
            options (SearchOptions): Tolerances, defaults to exact match.
            clip (ClipRegion): Region holding the candidate offsets, defaults to the whole haystack.

        Returns:
            MatchLocation of the top-left corner, or MatchLocation.not_found().

        Raises:
            GeometryError: If the haystack is smaller than the needle or the clip rectangle,
                or a clip that can hold the needle reaches outside the haystack.
        """
        if options is None:
            options = SearchOptions.default()
        if clip is None:
            clip = ClipRegion.full(haystack)

        self._check_sizes(needle, haystack, clip)

        # Last offset where the needle still fits inside the clip, inclusive.
        end_x = clip.x + clip.width - needle.width + 1
        end_y = clip.y + clip.height - needle.height + 1

        # A clip narrower or shorter than the needle holds no candidate offset.
        if end_x <= clip.x or end_y <= clip.y:
            logger.debug(f"Clip {clip} cannot hold a {needle.width}x{needle.height} needle")
            return MatchLocation.not_found()

        self._check_clip_bounds(haystack, clip)

        max_invalid_pixels = self.max_invalid_pixels(needle, options)
        tolerance_squared = self.pixel_tolerance_level(options)

        logger.debug(
            f"Searching {needle.width}x{needle.height} in {haystack.width}x{haystack.height} "
            f"clip={clip} max_invalid={max_invalid_pixels} tolerance²={tolerance_squared}"
        )

        rows = range(clip.y, end_y)
        if self.workers > 1 and len(rows) > 1:
            found = self._scan_parallel(needle, haystack, rows, clip.x, end_x,
                                        max_invalid_pixels, tolerance_squared)
        else:
            found = self._scan_rows(needle, haystack, rows, clip.x, end_x,
                                    max_invalid_pixels, tolerance_squared)

        if found is None:
            logger.debug("Needle not found")
            return MatchLocation.not_found()

        logger.debug(f"Needle found at {found}")
        return MatchLocation.at(*found)

    def matches_at(
        self,
        needle: PixelBuffer,
        haystack: PixelBuffer,
        offset_x: int,
        offset_y: int,
        max_invalid_pixels: int,
        tolerance_squared: int,
    ) -> bool:
        """
        Compare *needle* against the haystack window whose top-left is (offset_x, offset_y).

        Wildcard pixels shrink the remaining invalid-pixel budget as they are met,
        so a mostly transparent needle leaves little or no room for mismatches.
        """
        needle_pixels = needle.pixels
        haystack_pixels = haystack.pixels
        is_wildcard = self.pixel_service.is_wildcard
        is_close = self.pixel_service.is_close

        invalid_pixels = 0

        for y in range(needle.height):
            needle_row = y * needle.width
            haystack_row = (offset_y + y) * haystack.width + offset_x
            for x in range(needle.width):
                pixel = needle_pixels[needle_row + x]

                if is_wildcard(pixel):
                    max_invalid_pixels -= 1
                    continue

                if is_close(pixel, haystack_pixels[haystack_row + x], tolerance_squared):
                    continue

                invalid_pixels += 1
                if invalid_pixels > max_invalid_pixels:
                    return False

        return True

    @staticmethod
    def max_invalid_pixels(needle: PixelBuffer, options: SearchOptions) -> int:
        return _truncate(len(needle.pixels) * options.image_tolerance)

    @staticmethod
    def pixel_tolerance_level(options: SearchOptions) -> int:
        """Per-pixel threshold, squared to compare against PixelService.difference."""
        level = _truncate(options.pixel_tolerance * MAX_CHANNEL_VALUE)
        return level * level

    # ─── Internals ───────────────────────────────────────────────────
    @staticmethod
    def _check_sizes(needle: PixelBuffer, haystack: PixelBuffer, clip: ClipRegion) -> None:
        if (haystack.width < needle.width or haystack.height < needle.height
                or len(haystack.pixels) < len(needle.pixels)):
            raise GeometryError(
                f"Haystack {haystack.width}x{haystack.height} must be at least as large "
                f"as needle {needle.width}x{needle.height}"
            )

        if haystack.size < clip.area:
            raise GeometryError(
                f"Haystack {haystack.width}x{haystack.height} cannot be smaller "
                f"than clip {clip.width}x{clip.height}"
            )

    @staticmethod
    def _check_clip_bounds(haystack: PixelBuffer, clip: ClipRegion) -> None:
        """Only called when the clip holds at least one candidate offset."""
        if (clip.x < 0 or clip.y < 0
                or clip.x + clip.width > haystack.width
                or clip.y + clip.height > haystack.height):
            raise GeometryError(
                f"Clip {clip} reaches outside haystack {haystack.width}x{haystack.height}"
            )

    def _scan_rows(self, needle, haystack, rows, start_x, end_x, max_invalid_pixels, tolerance_squared,
                   stop: threading.Event | None = None):
        for y in rows:
            if stop is not None and stop.is_set():
                return None
            for x in range(start_x, end_x):
                if self.matches_at(needle, haystack, x, y, max_invalid_pixels, tolerance_squared):
                    return x, y
        return None

    def _scan_parallel(self, needle, haystack, rows, start_x, end_x, max_invalid_pixels, tolerance_squared):
        band_size = -(-len(rows) // self.workers)
        bands = [rows[i:i + band_size] for i in range(0, len(rows), band_size)]
        # stops[i] is set once a band above band i has a hit
        stops = [threading.Event() for _ in bands]

        def scan_band(index):
            found = self._scan_rows(needle, haystack, bands[index], start_x, end_x,
                                    max_invalid_pixels, tolerance_squared, stops[index])
            if found is not None:
                for stop in stops[index + 1:]:
                    stop.set()
            return found

        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            futures = [pool.submit(scan_band, i) for i in range(len(bands))]
            # Bands are ordered by y: the first band with a hit holds the first match.
            for i, future in enumerate(futures):
                found = future.result()
                if found is not None:
                    for pending in futures[i + 1:]:
                        pending.cancel()
                    return found
        return None


def find_pixels(
    needle: PixelBuffer,
    haystack: PixelBuffer,
    options: SearchOptions | None = None,
    clip: ClipRegion | None = None,
) -> MatchLocation:
    """Sequential search with a throwaway service."""
    return PixelSearchService(workers=1).find_pixels(needle, haystack, options, clip)
