# pipeline/needle_locator.py
from __future__ import annotations
import logging
import os
from typing import Tuple

import numpy as np
from dotenv import load_dotenv

from ..models.clip_region import ClipRegion
from ..models.match_location import MatchLocation
from ..models.pixel_buffer import PixelBuffer
from ..models.search_options import SearchOptions
from ..repositories.pixel_buffer_repository import PixelBufferRepository
from ..services.pixel_search_service import PixelSearchService

logger = logging.getLogger(__name__)

# env‑vars
load_dotenv()

# Default tolerances
PIXEL_TOLERANCE = float(os.getenv("PIXEL_TOLERANCE", "0.0"))
IMAGE_TOLERANCE = float(os.getenv("IMAGE_TOLERANCE", "0.0"))


def to_pixel_buffer(frame: np.ndarray | PixelBuffer) -> PixelBuffer:
    """
    Wrap a caller frame without copying it:
        • PixelBuffer         → returned as is
        • uint8  (H, W, 4)    → RGBA channels
        • uint32 (H, W)       → packed pixels, R in the lowest byte
    """
    if isinstance(frame, PixelBuffer):
        return frame
    if frame.ndim == 3:
        return PixelBufferRepository.from_rgba(frame)
    return PixelBufferRepository.from_packed(frame)


def locate_needle(
    needle: np.ndarray | PixelBuffer,
    haystack: np.ndarray | PixelBuffer,
    *,
    pixel_tolerance: float | None = None,
    image_tolerance: float | None = None,
    clip: ClipRegion | Tuple[int, int, int, int] | None = None,
    search_service: PixelSearchService | None = None,
) -> MatchLocation:
    """
    Find *needle* inside *haystack* (e.g. a sprite inside a captured frame).

    Tolerances fall back to PIXEL_TOLERANCE / IMAGE_TOLERANCE from the environment.
    *clip* may be a ClipRegion or an (x, y, width, height) tuple.
    The frames must stay untouched until this returns.
    """
    if search_service is None:
        search_service = PixelSearchService()
    if pixel_tolerance is None:
        pixel_tolerance = PIXEL_TOLERANCE
    if image_tolerance is None:
        image_tolerance = IMAGE_TOLERANCE
    if clip is not None and not isinstance(clip, ClipRegion):
        clip = ClipRegion(*clip)

    needle_buffer = to_pixel_buffer(needle)
    haystack_buffer = to_pixel_buffer(haystack)
    options = SearchOptions(pixel_tolerance=pixel_tolerance, image_tolerance=image_tolerance)

    location = search_service.find_pixels(needle_buffer, haystack_buffer, options, clip)

    if location:
        logger.info(f"Needle found at (x: {location.x}, y: {location.y})")
    else:
        logger.info("Needle could not be found in the haystack")
    return location
