from __future__ import annotations
from typing import Sequence, Iterator, overload
import numpy as np

from ..models.errors import SizeMismatchError
from ..models.pixel import Pixel
from ..models.pixel_buffer import PixelBuffer

# Packed pixels are little-endian: R lives in the lowest byte in memory.
PACKED_DTYPE = np.dtype("<u4")


class PackedPixelArray(Sequence[Pixel]):
    """
    Lazy Sequence[Pixel] over a 1-D packed uint32 numpy array.
    Holds a reference to the caller's array, never a copy.
    """

    def __init__(self, packed: np.ndarray):
        self.packed = packed

    def __len__(self) -> int:
        return self.packed.shape[0]

    @overload
    def __getitem__(self, index: int) -> Pixel: ...

    @overload
    def __getitem__(self, index: slice) -> PackedPixelArray: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return PackedPixelArray(self.packed[index])
        return Pixel(int(self.packed[index]))

    def __iter__(self) -> Iterator[Pixel]:
        for value in self.packed.tolist():
            yield Pixel(value)


class PixelBufferRepository:
    """
    Builds PixelBuffer views over caller-owned storage.
    No file I/O and no copies: every helper reinterprets the memory it is given.
    """

    @staticmethod
    def from_packed(packed: np.ndarray, width: int | None = None, height: int | None = None) -> PixelBuffer:
        """
        Wrap a uint32 array of packed pixels.

        Args:
            packed (np.ndarray): Shape (H, W), or flat (N,) when width/height are given.
            width (int): Required for flat arrays, inferred from 2-D ones.
            height (int): Required for flat arrays, inferred from 2-D ones.
        """
        if packed.dtype.kind != "u" or packed.dtype.itemsize != 4:
            raise ValueError(f"Packed pixels must be uint32, got {packed.dtype}")

        if packed.ndim == 2:
            rows, cols = packed.shape
            width = cols if width is None else width
            height = rows if height is None else height
        elif packed.ndim != 1:
            raise ValueError(f"Packed pixels must be 1-D or 2-D, got shape {packed.shape}")
        elif width is None or height is None:
            raise ValueError("width and height are required for a flat pixel array")

        # reshape(-1) only copies for non-contiguous input, which we refuse
        if not packed.flags["C_CONTIGUOUS"]:
            raise ValueError("Packed pixels must be C-contiguous (row-major)")

        return PixelBuffer(PackedPixelArray(packed.reshape(-1)), width, height)

    @classmethod
    def from_rgba(cls, rgba: np.ndarray) -> PixelBuffer:
        """
        Wrap an RGBA uint8 frame of shape (H, W, 4) as packed pixels, no copy.
        """
        if rgba.dtype != np.uint8 or rgba.ndim != 3 or rgba.shape[2] != 4:
            raise ValueError(f"Expected uint8 RGBA array of shape (H, W, 4), got {rgba.dtype} {rgba.shape}")
        if not rgba.flags["C_CONTIGUOUS"]:
            raise ValueError("RGBA pixels must be C-contiguous (row-major)")

        packed = rgba.view(PACKED_DTYPE)[:, :, 0]
        return cls.from_packed(packed)

    @classmethod
    def from_bytes(cls, data, width: int, height: int) -> PixelBuffer:
        """
        Wrap a raw buffer (bytes, bytearray, memoryview, mmap ...) of packed
        little-endian RGBA pixels.
        """
        expected = width * height * PACKED_DTYPE.itemsize
        nbytes = memoryview(data).nbytes
        if nbytes != expected:
            raise SizeMismatchError(
                f"Raw pixel data of {nbytes} bytes does not match "
                f"{width}x{height} ({expected} bytes)"
            )
        packed = np.frombuffer(data, dtype=PACKED_DTYPE)
        return cls.from_packed(packed, width, height)
