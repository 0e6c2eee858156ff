# Truevision TGA reading and writing, image/x-tga.
#
# Format (all little-endian):
#   18 byte header, see TGAHeader for the fields.
#   Optional image ID of id_length bytes. We skip it when reading and never
#     write one.
#   Then pixel data, either:
#     height * width * bytes-per-pixel raw bytes (data types 2 and 3), or
#     a sequence of RLE chunks (data types 10 and 11). Each chunk is one
#     header byte. Below 128 it is a literal run of header+1 pixels, stored
#     as-is. 128 and above is a repeat run of header-127 copies of the single
#     pixel that follows.
#   Rows go bottom-to-top unless image descriptor bit 0x20 is set. We always
#   set it on write, and flip on read when it isn't, so in memory row 0 is
#   always the top.
#
# Only grayscale, BGR and BGRA are handled. Color-mapped images are not; use a
# real image library if you need that.
#
# Copyright 2023 Philip Boulain.
# Licensed under the EUPL-1.2-or-later.

import dataclasses
import io
import logging
import typing

from pixels import (InvalidDimensions, OutOfBounds, PackedColor, PixelBuffer,
                    PixelFormat, TGAError)

__all__ = [
    'TGAError', 'InvalidDimensions', 'OutOfBounds', 'UnsupportedFormat',
    'UnsupportedDataType', 'MalformedStream', 'TGAHeader', 'Image',
    'read_header', 'write_header', 'encode_rle', 'decode_rle',
    'data_type_for',
]

HEADER_SIZE = 18
MAX_CHUNK_LENGTH = 128

# Image descriptor bits.
DESCRIPTOR_TOP_LEFT = 0x20
DESCRIPTOR_ALPHA_DEPTH = 0x08

# Data type codes.
UNCOMPRESSED_TRUECOLOR = 2
UNCOMPRESSED_GRAYSCALE = 3
RLE_TRUECOLOR = 10
RLE_GRAYSCALE = 11

_RAW_TYPES = (UNCOMPRESSED_TRUECOLOR, UNCOMPRESSED_GRAYSCALE)
_RLE_TYPES = (RLE_TRUECOLOR, RLE_GRAYSCALE)


class UnsupportedFormat(TGAError):
    pass


class UnsupportedDataType(TGAError):
    pass


class MalformedStream(TGAError):
    pass


@dataclasses.dataclass
class TGAHeader:
    id_length: int = 0
    color_map_type: int = 0
    data_type_code: int = 0
    color_map_origin: int = 0
    color_map_length: int = 0
    color_map_depth: int = 0
    origin_x: int = 0
    origin_y: int = 0
    width: int = 0
    height: int = 0
    bits_per_pixel: int = 0
    image_descriptor: int = 0

    @property
    def top_left_origin(self) -> bool:
        return bool(self.image_descriptor & DESCRIPTOR_TOP_LEFT)


# Field name and (width, signed), in file order.
_HEADER_LAYOUT: typing.List[typing.Tuple[str, int, bool]] = [
    ('id_length', 1, False),
    ('color_map_type', 1, False),
    ('data_type_code', 1, False),
    ('color_map_origin', 2, True),
    ('color_map_length', 2, True),
    ('color_map_depth', 1, False),
    ('origin_x', 2, True),
    ('origin_y', 2, True),
    ('width', 2, True),
    ('height', 2, True),
    ('bits_per_pixel', 1, False),
    ('image_descriptor', 1, False),
]


def write_header(out: typing.BinaryIO, header: TGAHeader) -> None:
    for (name, length, signed) in _HEADER_LAYOUT:
        out.write(getattr(header, name).to_bytes(
            length=length, byteorder='little', signed=signed))


def read_header(source: typing.BinaryIO) -> TGAHeader:
    """Parse the fixed header. Values are not checked; that's load's job."""
    raw = source.read(HEADER_SIZE)
    if len(raw) != HEADER_SIZE:
        raise MalformedStream("TGA header truncated")
    header = TGAHeader()
    pos = 0
    for (name, length, signed) in _HEADER_LAYOUT:
        setattr(header, name, int.from_bytes(
            raw[pos:pos + length], byteorder='little', signed=signed))
        pos += length
    return header


def data_type_for(format: PixelFormat, use_rle: bool) -> int:
    if format == PixelFormat.GRAYSCALE:
        return RLE_GRAYSCALE if use_rle else UNCOMPRESSED_GRAYSCALE
    return RLE_TRUECOLOR if use_rle else UNCOMPRESSED_TRUECOLOR


def encode_rle(buffer: PixelBuffer, out: typing.BinaryIO) -> int:
    """Write the whole buffer as RLE chunks. Returns the number of chunks."""
    data = buffer.data
    bpp = buffer.bpp
    width = buffer.width
    pixel_count = buffer.pixel_count
    chunks = 0

    current_pixel = 0
    while current_pixel < pixel_count:
        chunk_start = current_pixel * bpp
        current_byte = chunk_start
        run_length = 1
        literal = True
        while (current_pixel + run_length < pixel_count
               and run_length < MAX_CHUNK_LENGTH
               and run_length < width):
            next_equal = (data[current_byte:current_byte + bpp]
                          == data[current_byte + bpp:current_byte + 2 * bpp])
            current_byte += bpp
            # The first pair decides what kind of run this is.
            if run_length == 1:
                literal = not next_equal
            if literal and next_equal:
                # Leave the first of the pair to start the next repeat run.
                run_length -= 1
                break
            if not literal and not next_equal:
                break
            run_length += 1
        current_pixel += run_length

        if literal:
            out.write(bytes((run_length - 1,)))
            out.write(data[chunk_start:chunk_start + run_length * bpp])
        else:
            out.write(bytes((128 + (run_length - 1),)))
            out.write(data[chunk_start:chunk_start + bpp])
        chunks += 1
    return chunks


def decode_rle(source: typing.BinaryIO, buffer: PixelBuffer) -> None:
    data = buffer.data
    bpp = buffer.bpp
    pixel_count = buffer.pixel_count

    current_pixel = 0
    current_byte = 0
    while current_pixel < pixel_count:
        chunk_header = source.read(1)
        if len(chunk_header) != 1:
            raise MalformedStream(
                f"File truncated after {current_pixel} of {pixel_count} pixels")
        count = chunk_header[0]
        literal = count < 128
        if literal:
            count += 1
        else:
            count -= 127
        if current_pixel + count > pixel_count:
            raise MalformedStream("Too many pixels read")

        length = count * bpp
        if literal:
            chunk = source.read(length)
            if len(chunk) != length:
                raise MalformedStream("File truncated inside literal run")
            data[current_byte:current_byte + length] = chunk
        else:
            color = source.read(bpp)
            if len(color) != bpp:
                raise MalformedStream("File truncated inside repeat run")
            data[current_byte:current_byte + length] = color * count
        current_pixel += count
        current_byte += length


class Image:
    """A raster image which can be loaded from, and saved to, TGA."""

    def __init__(self, width: int, height: int, format: PixelFormat):
        self.buffer = PixelBuffer(width, height, format)

    @classmethod
    def create(cls, width: int, height: int, format: PixelFormat) -> 'Image':
        return cls(width, height, format)

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def height(self) -> int:
        return self.buffer.height

    @property
    def format(self) -> PixelFormat:
        return self.buffer.format

    @property
    def bytes_per_row(self) -> int:
        return self.buffer.bytes_per_row

    def get(self, x: int, y: int) -> PackedColor:
        return self.buffer.get(x, y)

    def set(self, x: int, y: int, color: PackedColor) -> None:
        self.buffer.set(x, y, color)

    def clear(self) -> None:
        self.buffer.clear()

    def vertical_flip(self) -> None:
        self.buffer.vertical_flip()

    def header(self, use_rle: bool) -> TGAHeader:
        descriptor = DESCRIPTOR_TOP_LEFT
        if self.format == PixelFormat.BGRA:
            descriptor |= DESCRIPTOR_ALPHA_DEPTH
        return TGAHeader(
            data_type_code=data_type_for(self.format, use_rle),
            width=self.width,
            height=self.height,
            bits_per_pixel=self.buffer.bpp * 8,
            image_descriptor=descriptor)

    # Writing.

    def _check_size(self) -> None:
        if self.width > 0x7FFF or self.height > 0x7FFF:
            # The header only has signed 16-bit room.
            raise InvalidDimensions(
                f"{self.width}x{self.height} is too large for TGA")

    def save(self, path: str, use_rle: bool = True) -> bool:
        # Before opening, so a failure doesn't truncate an existing file.
        self._check_size()
        with open(path, 'wb') as tgafile:
            self.save_stream(tgafile, use_rle)
        return True

    def save_stream(self, out: typing.BinaryIO, use_rle: bool = True) -> None:
        self._check_size()
        header = self.header(use_rle)
        write_header(out, header)
        if use_rle:
            chunks = encode_rle(self.buffer, out)
            logging.debug(f"Wrote {self.width}x{self.height} "
                          f"{self.format.name} TGA as {chunks} RLE chunks")
        else:
            out.write(self.buffer.data)
            logging.debug(f"Wrote {self.width}x{self.height} "
                          f"{self.format.name} TGA uncompressed")

    def encode(self, use_rle: bool = True) -> bytes:
        buf = io.BytesIO()
        self.save_stream(buf, use_rle)
        return buf.getvalue()

    # Reading.

    @classmethod
    def load(cls, path: str) -> 'Image':
        with open(path, 'rb') as tgafile:
            return cls.load_stream(tgafile)

    @classmethod
    def decode(cls, tga: typing.Union[bytes, memoryview]) -> 'Image':
        return cls.load_stream(io.BytesIO(tga))

    @classmethod
    def load_stream(cls, source: typing.BinaryIO) -> 'Image':
        header = read_header(source)
        logging.debug(f"TGA header: {header}")

        format = PixelFormat.from_bits_per_pixel(header.bits_per_pixel)
        if format is None:
            raise UnsupportedFormat(
                f"unknown format: {header.bits_per_pixel} bits per pixel")
        if header.width <= 0 or header.height <= 0:
            raise InvalidDimensions(f"bad image size: width={header.width} "
                                    f"height={header.height}")
        if header.data_type_code not in _RAW_TYPES + _RLE_TYPES:
            raise UnsupportedDataType(
                f"unsupported image data type {header.data_type_code}")

        img = cls(header.width, header.height, format)
        if header.id_length:
            if len(source.read(header.id_length)) != header.id_length:
                raise MalformedStream("File truncated inside image ID")

        if header.data_type_code in _RAW_TYPES:
            size = len(img.buffer.data)
            body = source.read(size)
            if len(body) != size:
                raise MalformedStream(
                    f"File truncated: {len(body)} of {size} pixel bytes")
            img.buffer.data[:] = body
        else:
            decode_rle(source, img.buffer)

        if not header.top_left_origin:
            img.vertical_flip()
        return img
