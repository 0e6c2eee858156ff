# Pixel formats, packed colors, and the raw pixel buffer behind tga.Image.
#
# A buffer is one contiguous bytearray, rows top to bottom, each row being
# width * bytes-per-pixel bytes. Channels are stored in TGA order: B, G, R and
# then A if there is one. Grayscale is a single byte.
#
# Copyright 2023 Philip Boulain.
# Licensed under the EUPL-1.2-or-later.

import dataclasses
import enum
import typing


class TGAError(ValueError):
    """Base for everything the image code raises about bad data."""


class InvalidDimensions(TGAError):
    pass


class OutOfBounds(TGAError, IndexError):
    pass


class PixelFormat(enum.IntEnum):
    # The value *is* the byte width.
    GRAYSCALE = 1
    BGR = 3
    BGRA = 4

    @classmethod
    def from_bits_per_pixel(cls, bits: int) -> typing.Optional['PixelFormat']:
        """Map a header bit depth onto a format, or None if we can't do it."""
        if bits % 8 != 0:
            return None
        try:
            return cls(bits >> 3)
        except ValueError:
            return None


def bytes_per_pixel(format: PixelFormat) -> int:
    return int(format)


@dataclasses.dataclass(frozen=True)
class PackedColor:
    """A 32-bit color, first stored channel in the top byte."""
    value: int
    format: PixelFormat

    @classmethod
    def from_channels(cls, channels: typing.Sequence[int],
                      format: PixelFormat) -> 'PackedColor':
        # Same composition as PixelBuffer.get(): missing channels are opaque.
        value = 0
        for ch in range(0, 4):
            value = (value << 8) | (channels[ch] if ch < len(channels) else 0xFF)
        return cls(value, format)

    def channels(self) -> bytes:
        """The bytes that would be stored for this color, in stored order."""
        return (self.value & 0xFFFFFFFF).to_bytes(length=4, byteorder='big')[
            :bytes_per_pixel(self.format)]


class PixelBuffer:
    def __init__(self, width: int, height: int, format: PixelFormat):
        if width <= 0 or height <= 0:
            raise InvalidDimensions(
                f"bad image size: width={width} height={height}")
        self.width = width
        self.height = height
        self.format = format
        self.data = bytearray(height * self.bytes_per_row)

    @property
    def bpp(self) -> int:
        return bytes_per_pixel(self.format)

    @property
    def bytes_per_row(self) -> int:
        return self.width * self.bpp

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def offset(self, x: int, y: int) -> int:
        return y * self.bytes_per_row + x * self.bpp

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> PackedColor:
        if x < 0 or x >= self.width:
            raise OutOfBounds(f"x={x} outside width={self.width}")
        if y < 0 or y >= self.height:
            raise OutOfBounds(f"y={y} outside height={self.height}")
        offset = self.offset(x, y)
        return PackedColor.from_channels(
            self.data[offset:offset + self.bpp], self.format)

    def set(self, x: int, y: int, color: PackedColor) -> None:
        # Unlike get(), writing off the edge is quietly dropped. Drawing code
        # leans on this to not have to clip.
        if not self.in_bounds(x, y):
            return
        offset = self.offset(x, y)
        bpp = self.bpp
        self.data[offset:offset + bpp] = (
            (color.value & 0xFFFFFFFF).to_bytes(length=4, byteorder='big')[:bpp])

    def clear(self) -> None:
        self.data[:] = bytes(len(self.data))

    def vertical_flip(self) -> None:
        row = self.bytes_per_row
        for top in range(0, self.height >> 1):
            bottom = self.height - 1 - top
            t = top * row
            b = bottom * row
            (self.data[t:t + row], self.data[b:b + row]) = (
                self.data[b:b + row], self.data[t:t + row])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return (self.width == other.width and self.height == other.height
                and self.format == other.format and self.data == other.data)

    def __repr__(self) -> str:
        return (f"PixelBuffer({self.width}x{self.height}, "
                f"{self.format.name})")
