import flask
import logging
import os
import tga
import tgautils
from PIL import Image
from werkzeug.utils import safe_join

try:
    import tgaserver_config as config
except ModuleNotFoundError:
    # No local copy is fine; run with the example settings.
    import tgaserver_config_example as config
# ImportError, however, means a config exists and is broken. Let it propagate.

app = flask.Flask(__name__)
app.config.from_object(config)

@app.route("/hello")
def hello():
    return "", 204

@app.route("/heartbeat")
def heartbeat():
    return "", 204

def _flag(request: flask.Request, name: str, default: bool) -> bool:
    value = request.args.get(name)
    if value is None:
        return default
    return value.lower() not in ("0", "false", "no", "off", "")

def load_any(path: str) -> tga.Image:
    """Load with our own decoder if it's TGA, otherwise via PIL."""
    if path.lower().endswith(".tga"):
        return tga.Image.load(path)
    with Image.open(path) as im:
        return tgautils.from_pil(im)

@app.route("/images/<path:filename>")
def image(filename: str) -> flask.Response:
    # safe_join gives None for anything trying to climb out of the directory.
    path = safe_join(app.config["IMAGE_DIRECTORY"], filename)
    if path is None or not os.path.isfile(path):
        return tgautils.respond_txt("No such image", 404)

    try:
        im = load_any(path)
    except (ValueError, OSError):
        # PIL decodes lazily, so a damaged file only fails in from_pil(), as
        # an OSError. TGAError and PIL's unsupported conversions are
        # ValueErrors. Missing files were dealt with above.
        logging.exception(f"Could not decode {path}")
        return tgautils.respond_txt("Image could not be decoded", 415)

    if _flag(flask.request, "flip", False):
        im.vertical_flip()
    use_rle = _flag(flask.request, "rle", app.config["USE_RLE"])
    return tgautils.respond_tga(im, use_rle)

if __name__ == "__main__":
    logging.basicConfig(level=app.config["LOG_LEVEL"])
    app.run()
