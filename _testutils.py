# file: _testutils.py

from hypothesis import strategies as st

from pixels import PixelBuffer, PixelFormat

st_formats = st.sampled_from(list(PixelFormat))


@st.composite
def st_buffers(draw, max_side: int = 12) -> PixelBuffer:
    """Buffers of any format and size, filled with random bytes."""
    width = draw(st.integers(1, max_side))
    height = draw(st.integers(1, max_side))
    buffer = PixelBuffer(width, height, draw(st_formats))
    buffer.data[:] = draw(st.binary(min_size=len(buffer.data),
                                    max_size=len(buffer.data)))
    return buffer
