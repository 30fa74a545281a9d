"""Image helpers: thumbnail downscaling and palette sampling."""
from PIL import Image, UnidentifiedImageError
import io


def optimize_thumbnail(image_bytes: bytes, max_width: int = 1200) -> bytes:
    """
    Downscale a captured resume image for storage.
    Captures come out at 3x scale (~2400px wide for an A4 page); the
    dashboard card never needs more than max_width.
    Output stays PNG so text edges don't pick up JPEG artifacts.
    """
    img = Image.open(io.BytesIO(image_bytes))

    w, h = img.size
    if w <= max_width:
        return image_bytes

    ratio = max_width / w
    img = img.resize((max_width, max(1, int(h * ratio))), Image.LANCZOS)

    buf = io.BytesIO()
    img.save(buf, format="PNG", optimize=True)
    return buf.getvalue()


def get_light_color_from_image(image_bytes: bytes) -> str:
    """
    Average color of the light pixels (mean channel > 100) as "rgb(r, g, b)".
    Returns "#ffffff" if the image can't be read or has no light pixels.
    """
    try:
        img = Image.open(io.BytesIO(image_bytes)).convert("RGB")
    except (UnidentifiedImageError, OSError):
        return "#ffffff"

    r = g = b = count = 0
    for red, green, blue in img.getdata():
        if (red + green + blue) / 3 > 100:
            r += red
            g += green
            b += blue
            count += 1

    if count == 0:
        return "#ffffff"
    return f"rgb({round(r / count)}, {round(g / count)}, {round(b / count)})"
