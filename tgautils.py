import flask
import typing
from PIL import Image as PILImage

import tga
from pixels import PixelFormat

# PIL is the "standard" image library, so it's what we convert through for
# anything that isn't TGA. PIL can read TGA itself too, which the tests use to
# check we agree with it.

TGA_MIMETYPE = 'image/x-tga'

# tga format -> (PIL mode, PIL raw mode matching our byte order).
_PIL_MODES: typing.Dict[PixelFormat, typing.Tuple[str, str]] = {
    PixelFormat.GRAYSCALE: ('L', 'L'),
    PixelFormat.BGR: ('RGB', 'BGR'),
    PixelFormat.BGRA: ('RGBA', 'BGRA'),
}


def to_pil(image: tga.Image) -> PILImage.Image:
    """Copy a tga.Image into a new PIL image."""
    (mode, rawmode) = _PIL_MODES[image.format]
    return PILImage.frombytes(mode, (image.width, image.height),
                              bytes(image.buffer.data), 'raw', rawmode)


def _format_for_mode(pil_image: PILImage.Image) -> PixelFormat:
    if pil_image.mode == 'L':
        return PixelFormat.GRAYSCALE
    if pil_image.mode in ('RGBA', 'LA', 'PA', 'RGBa', 'La'):
        return PixelFormat.BGRA
    if pil_image.mode == 'P' and 'transparency' in pil_image.info:
        return PixelFormat.BGRA
    # Anything else (1, P, CMYK, YCbCr...) gets squashed into truecolor. Modes
    # PIL has no RGB conversion for raise ValueError from convert().
    return PixelFormat.BGR


def from_pil(pil_image: PILImage.Image) -> tga.Image:
    """Copy a PIL image into a new tga.Image, picking the closest format."""
    format = _format_for_mode(pil_image)
    (mode, rawmode) = _PIL_MODES[format]
    if pil_image.mode != mode:
        pil_image = pil_image.convert(mode)
    image = tga.Image(pil_image.width, pil_image.height, format)
    image.buffer.data[:] = pil_image.tobytes('raw', rawmode)
    return image


def respond_tga(image: tga.Image, use_rle: bool = True) -> flask.Response:
    """Build a response from an image by TGA-encoding it."""
    # Hand flask the bytes, not a stream, so it isn't sent chunked.
    response: flask.Response = flask.make_response(image.encode(use_rle))
    response.mimetype = TGA_MIMETYPE
    if use_rle:
        response.headers['X-TGA-Compression'] = 'RLE'
    return response


def respond_txt(text: str, status: int = 200) -> flask.Response:
    """Build a response from UTF-8 plaintext."""
    response: flask.Response = flask.make_response(text, status)
    response.content_type = 'text/plain; charset=utf-8'
    return response
