# Copy this to tgaserver_config.py and edit to taste; tgaserver uses that in
# preference to this file if it exists.

# Directory of images to hand out. Anything PIL can open works, as does TGA.
IMAGE_DIRECTORY = "images"
# Whether to RLE-compress responses when the request doesn't say (?rle=0/1).
# Uncompressed is larger but trivial for tiny clients to blit.
USE_RLE = True
# Passed straight to logging.basicConfig() when run directly.
LOG_LEVEL = "INFO"
