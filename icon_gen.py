"""Generate the system-tray icon (64×64 PIL Image, in-memory)."""

from datetime import date

from PIL import Image, ImageDraw, ImageFont

ACCENT = "#A0144F"


def create_icon_image(day: int | None = None) -> Image.Image:
    """Return a 64×64 RGBA calendar page: accent top band, day of month below."""
    size = 64
    band = 16
    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    draw.rounded_rectangle((0, 0, size - 1, size - 1), radius=8, fill="white", outline=ACCENT)
    draw.rounded_rectangle((0, 0, size - 1, band), radius=8, fill=ACCENT)
    draw.rectangle((0, band // 2, size - 1, band), fill=ACCENT)

    text = str(day if day is not None else date.today().day)
    avail_h = size - band - 4

    # Find the largest font size that fits below the band
    font_size = 60
    font = None
    while font_size > 10:
        try:
            font = ImageFont.truetype("DejaVuSans-Bold.ttf", font_size)
        except OSError:
            font = ImageFont.load_default()
            break
        bbox = draw.textbbox((0, 0), text, font=font)
        if bbox[2] - bbox[0] <= size - 8 and bbox[3] - bbox[1] <= avail_h:
            break
        font_size -= 1

    # Centre the visible pixels in the area under the band
    bbox = draw.textbbox((0, 0), text, font=font)
    x = (size - (bbox[2] - bbox[0])) / 2 - bbox[0]
    y = band + (size - band - (bbox[3] - bbox[1])) / 2 - bbox[1]
    draw.text((x, y), text, fill="black", font=font)

    return img
