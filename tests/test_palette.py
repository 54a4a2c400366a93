import random
import threading

import pytest
from PIL import Image

from pixfilter.config import DEFAULT_PALETTE
from pixfilter.processing.color import Color, distance
from pixfilter.processing.palette import PaletteStore, nearest_color, quantize
from pixfilter.processing.raster import FullColor


def _brute_force(color, palette):
    best_index = min(range(len(palette)), key=lambda i: (distance(color, palette[i]), i))
    return palette[best_index]


def test_default_store_holds_eight_colors_in_order() -> None:
    store = PaletteStore()

    assert store.colors == tuple(Color(*rgb) for rgb in DEFAULT_PALETTE)
    assert store.colors[0] == (0, 0, 0)
    assert store.colors[-1] == (0, 255, 255)


@pytest.mark.parametrize(
    "palette, expected",
    [
        ([(10, 0, 0), (0, 10, 0)], (10, 0, 0)),
        ([(0, 10, 0), (10, 0, 0)], (0, 10, 0)),
        ([(5, 5, 5), (5, 5, 5), (0, 0, 9)], (5, 5, 5)),
    ],
)
def test_nearest_breaks_ties_by_palette_order(palette, expected) -> None:
    store = PaletteStore(palette)

    assert store.nearest((0, 0, 0)) == expected


def test_nearest_matches_brute_force_search() -> None:
    rng = random.Random(1234)
    for _ in range(50):
        palette = [Color(*(rng.randrange(0, 256, 17) for _ in range(3))) for _ in range(rng.randint(1, 12))]
        store = PaletteStore(palette)
        for _ in range(20):
            color = Color(*(rng.randrange(256) for _ in range(3)))
            assert store.nearest(color) == _brute_force(color, palette)
            assert nearest_color(color, palette) == _brute_force(color, palette)


def test_nearest_on_empty_palette_returns_input(caplog) -> None:
    store = PaletteStore(())

    with caplog.at_level("WARNING"):
        assert store.nearest((12, 34, 56)) == (12, 34, 56)

    assert "empty" in caplog.text


def test_set_active_replaces_palette_wholesale() -> None:
    store = PaletteStore()

    assert store.set_active([(1, 2, 3), (4, 5, 6)]) is True
    assert store.colors == (Color(1, 2, 3), Color(4, 5, 6))
    assert store.nearest((200, 200, 200)) == (4, 5, 6)


def test_set_active_rejects_empty_palette() -> None:
    store = PaletteStore()

    with pytest.raises(ValueError):
        store.set_active([])

    assert len(store.colors) == 8


def test_reset_restores_default_palette() -> None:
    store = PaletteStore([(9, 9, 9)])

    store.reset()

    assert store.colors == tuple(Color(*rgb) for rgb in DEFAULT_PALETTE)


def test_lock_failure_falls_back_to_identity(caplog) -> None:
    store = PaletteStore([(0, 0, 0)], lock_timeout=0.01)
    assert store._lock.acquire_write()
    try:
        with caplog.at_level("WARNING"):
            assert store.nearest((200, 100, 50)) == (200, 100, 50)
            assert store.set_active([(255, 255, 255)]) is False
    finally:
        store._lock.release_write()

    assert "lock" in caplog.text
    assert store.colors == (Color(0, 0, 0),)


def test_readers_share_the_lock_and_exclude_writers() -> None:
    store = PaletteStore(lock_timeout=0.01)
    lock = store._lock

    assert lock.acquire_read(0.01)
    assert lock.acquire_read(0.01)
    assert not lock.acquire_write(0.01)
    lock.release_read()
    lock.release_read()
    assert lock.acquire_write(0.01)
    lock.release_write()


def test_concurrent_readers_see_whole_palettes() -> None:
    first = [(0, 0, 0), (255, 255, 255)]
    second = [(255, 0, 0), (0, 0, 255)]
    store = PaletteStore(first)
    seen = []
    errors = []

    def reader() -> None:
        try:
            for _ in range(200):
                seen.append(store.colors)
        except Exception as exc:  # pragma: no cover - surfaced by the assertion below
            errors.append(exc)

    threads = [threading.Thread(target=reader) for _ in range(4)]
    for thread in threads:
        thread.start()
    for index in range(50):
        store.set_active(second if index % 2 else first)
    for thread in threads:
        thread.join()

    assert not errors
    allowed = {tuple(Color(*c) for c in first), tuple(Color(*c) for c in second)}
    assert set(seen) <= allowed


def test_quantize_flat_red_is_unchanged() -> None:
    store = PaletteStore([(0, 0, 0), (255, 0, 0)])
    src = FullColor(Image.new("RGB", (2, 2), (255, 0, 0)))

    out = quantize(src, store)

    assert out.image.mode == "RGB"
    assert list(out.image.getdata()) == [(255, 0, 0)] * 4


def test_quantize_maps_each_pixel_to_nearest_entry() -> None:
    store = PaletteStore()
    img = Image.new("RGB", (3, 1))
    img.putdata([(20, 10, 5), (240, 230, 250), (200, 40, 30)])

    out = quantize(FullColor(img), store)

    assert list(out.image.getdata()) == [(0, 0, 0), (255, 255, 255), (255, 0, 0)]


def test_quantize_is_idempotent() -> None:
    store = PaletteStore([(32, 32, 32), (128, 255, 0), (255, 51, 153)])
    rng = random.Random(7)
    img = Image.new("RGB", (8, 6))
    img.putdata([tuple(rng.randrange(256) for _ in range(3)) for _ in range(48)])

    once = quantize(FullColor(img), store)
    twice = quantize(once, store)

    assert list(twice.image.getdata()) == list(once.image.getdata())


def test_quantize_restores_default_when_palette_is_empty(caplog) -> None:
    store = PaletteStore(())
    src = FullColor(Image.new("RGB", (1, 1), (250, 10, 10)))

    with caplog.at_level("WARNING"):
        out = quantize(src, store)

    assert out.image.getpixel((0, 0)) == (255, 0, 0)
    assert len(store.colors) == 8
