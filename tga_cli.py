#!/usr/bin/env python3
# TGA command line tool.
#
# Encodes anything PIL can read into TGA using our own encoder (so you get our
# RLE chunking, not PIL's), or decodes TGA with our decoder into anything PIL
# can write. It doesn't resize or change the pixel format for you beyond what
# from_pil() picks.
#
# Copyright 2023 Philip Boulain.
# Licensed under the EUPL-1.2-or-later.

import argparse
import logging
import sys
import typing
from PIL import Image

import tga
import tgautils


def build_parser() -> argparse.ArgumentParser:
    arg_parser = argparse.ArgumentParser(
        prog="tga-cli",
        description="TGA image encoder.",
        epilog="Encodes any image PIL can read to TGA, or decodes TGA to any "
               "image PIL can write (type determined by file extension).")
    arg_parser.add_argument("infile", help="File to read")
    arg_parser.add_argument("outfile", help="File to write, will be overwritten")
    arg_parser.add_argument("--decode", action="store_true",
        help="Decode the input to the output, instead of encode")
    arg_parser.add_argument("--raw", action="store_true",
        help="Write uncompressed TGA instead of RLE")
    arg_parser.add_argument("--flip", action="store_true",
        help="Flip the image vertically on the way through")
    arg_parser.add_argument("--verbose", action="store_true",
        help="Log what the codec is doing")
    return arg_parser


def main(argv: typing.Optional[typing.List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        if args.decode:
            image = tga.Image.load(args.infile)
            if args.flip:
                image.vertical_flip()
            tgautils.to_pil(image).save(args.outfile)
        else:
            with Image.open(args.infile) as pil_image:
                image = tgautils.from_pil(pil_image)
            if args.flip:
                image.vertical_flip()
            image.save(args.outfile, use_rle=not args.raw)
    except (ValueError, OSError) as e:
        # TGAError is a ValueError, as is PIL's "unknown file extension".
        # PIL's "can't identify this image" is an OSError.
        logging.error(f"{args.infile}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
