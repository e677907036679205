from icon_gen import ACCENT, create_icon_image


def test_icon_size_and_mode():
    img = create_icon_image(31)
    assert img.size == (64, 64)
    assert img.mode == "RGBA"


def test_icon_has_accent_band_and_digits():
    img = create_icon_image(8)
    r, g, b = (int(ACCENT[i:i + 2], 16) for i in (1, 3, 5))
    assert img.getpixel((32, 5)) == (r, g, b, 255)
    # some dark pixels for the day number below the band
    lower = img.crop((4, 18, 60, 60)).convert("L")
    assert min(lower.getdata()) < 128
