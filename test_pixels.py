# file: test_pixels.py

import pytest
from hypothesis import given
from hypothesis import strategies as st

from pixels import (InvalidDimensions, OutOfBounds, PackedColor, PixelBuffer,
                    PixelFormat, TGAError, bytes_per_pixel)
from _testutils import st_buffers, st_formats


def test_format_values_are_byte_widths():
    assert [bytes_per_pixel(f) for f in PixelFormat] == [1, 3, 4]


@pytest.mark.parametrize('bits,expected', [
    (8, PixelFormat.GRAYSCALE),
    (24, PixelFormat.BGR),
    (32, PixelFormat.BGRA),
    (16, None),
    (15, None),
    (0, None),
    (64, None),
])
def test_format_from_bits_per_pixel(bits, expected):
    assert PixelFormat.from_bits_per_pixel(bits) is expected


@pytest.mark.parametrize('width,height', [(0, 1), (1, 0), (-3, 4), (4, -3)])
def test_new_rejects_non_positive_size(width, height):
    with pytest.raises(InvalidDimensions):
        PixelBuffer(width, height, PixelFormat.BGR)


def test_invalid_dimensions_is_a_value_error():
    assert issubclass(InvalidDimensions, TGAError)
    assert issubclass(TGAError, ValueError)
    assert issubclass(OutOfBounds, IndexError)


@given(st.integers(1, 40), st.integers(1, 40), st_formats)
def test_new_buffer_size_and_zero_fill(width, height, format):
    buffer = PixelBuffer(width, height, format)
    assert buffer.bytes_per_row == width * int(format)
    assert len(buffer.data) == height * buffer.bytes_per_row
    assert not any(buffer.data)


def test_get_composes_most_significant_first():
    buffer = PixelBuffer(2, 1, PixelFormat.BGR)
    buffer.data[3:6] = bytes((0x11, 0x22, 0x33))
    color = buffer.get(1, 0)
    # Missing alpha reads as opaque.
    assert color == PackedColor(0x112233FF, PixelFormat.BGR)
    assert buffer.get(0, 0).value == 0x000000FF


def test_get_grayscale_fills_remaining_channels():
    buffer = PixelBuffer(1, 1, PixelFormat.GRAYSCALE)
    buffer.data[0] = 0x80
    assert buffer.get(0, 0).value == 0x80FFFFFF


def test_set_writes_only_bytes_per_pixel():
    buffer = PixelBuffer(2, 2, PixelFormat.BGR)
    buffer.set(1, 1, PackedColor(0xAABBCCDD, PixelFormat.BGR))
    assert buffer.data == bytearray(9) + bytearray((0xAA, 0xBB, 0xCC))


def test_set_bgra_roundtrips_through_get():
    buffer = PixelBuffer(3, 2, PixelFormat.BGRA)
    color = PackedColor(0x01020304, PixelFormat.BGRA)
    buffer.set(2, 1, color)
    assert buffer.get(2, 1) == color
    assert buffer.data[buffer.offset(2, 1):] == bytearray((1, 2, 3, 4))


@pytest.mark.parametrize('x,y', [(-1, 0), (3, 0), (0, -1), (0, 2), (99, 99)])
def test_get_out_of_bounds_raises(x, y):
    buffer = PixelBuffer(3, 2, PixelFormat.GRAYSCALE)
    with pytest.raises(OutOfBounds):
        buffer.get(x, y)


@pytest.mark.parametrize('x,y', [(-1, 0), (3, 0), (0, -1), (0, 2), (99, 99)])
def test_set_out_of_bounds_is_ignored(x, y):
    buffer = PixelBuffer(3, 2, PixelFormat.BGRA)
    buffer.data[:] = bytes(range(len(buffer.data)))
    before = bytes(buffer.data)
    buffer.set(x, y, PackedColor(0xFFFFFFFF, PixelFormat.BGRA))
    assert bytes(buffer.data) == before


def test_clear():
    buffer = PixelBuffer(4, 4, PixelFormat.BGR)
    buffer.data[:] = b'\xff' * len(buffer.data)
    buffer.clear()
    assert len(buffer.data) == 48 and not any(buffer.data)


def test_vertical_flip_swaps_rows_and_keeps_middle():
    buffer = PixelBuffer(2, 3, PixelFormat.GRAYSCALE)
    buffer.data[:] = bytes((1, 2, 3, 4, 5, 6))
    buffer.vertical_flip()
    assert buffer.data == bytearray((5, 6, 3, 4, 1, 2))


def test_vertical_flip_single_row_is_noop():
    buffer = PixelBuffer(3, 1, PixelFormat.BGR)
    buffer.data[:] = bytes(range(9))
    buffer.vertical_flip()
    assert buffer.data == bytearray(range(9))


@given(st_buffers())
def test_vertical_flip_is_an_involution(buffer):
    original = bytes(buffer.data)
    buffer.vertical_flip()
    buffer.vertical_flip()
    assert bytes(buffer.data) == original


@given(st.binary(min_size=4, max_size=4), st_formats)
def test_packed_color_channels(raw, format):
    color = PackedColor.from_channels(raw[:int(format)], format)
    assert color.channels() == raw[:int(format)]
