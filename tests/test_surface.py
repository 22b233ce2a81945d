from dashsim.surface import BACKGROUND, Surface, hex_rgb


def near(got, want, tol=2):
    return all(abs(g - w) <= tol for g, w in zip(got, want))


def test_background_and_bytes():
    s = Surface(40, 30)
    assert s.pixel(0, 0) == BACKGROUND
    assert len(s.to_bytes()) == 40 * 30 * 3


def test_fade_blends_toward_colour():
    s = Surface(4, 4, background=(0, 0, 0))
    s.fade((100, 200, 50), 0.2)
    assert near(s.pixel(1, 1), (20, 40, 10))
    s.fade((100, 200, 50), 0.2)
    assert near(s.pixel(1, 1), (36, 72, 18), tol=3)


def test_fade_with_background_keeps_background():
    s = Surface(4, 4)
    s.fade()
    assert near(s.pixel(2, 2), BACKGROUND)


def test_circle_is_opaque_and_clipped():
    s = Surface(20, 20, background=(0, 0, 0))
    s.circle(10, 10, 3, (255, 0, 0))
    assert s.pixel(10, 10) == (255, 0, 0)
    assert s.pixel(11, 10) == (255, 0, 0)
    assert s.pixel(16, 10) == (0, 0, 0)
    s.circle(0, 0, 2, (0, 255, 0))
    assert s.pixel(0, 0) == (0, 255, 0)
    s.circle(-50, -50, 2, (0, 255, 0))  # fully outside: no-op


def test_line_is_blended_and_clipped():
    s = Surface(20, 10, background=(0, 0, 0))
    s.line(0, 5, 40, 5, (100, 100, 100), 0.5)
    assert near(s.pixel(10, 5), (50, 50, 50))
    assert s.pixel(10, 3) == (0, 0, 0)
    before = s.to_bytes()
    s.line(-10, -10, -1, -1)  # outside: no-op
    assert s.to_bytes() == before


def test_line_layer_is_cleared_between_strokes():
    s = Surface(20, 10, background=(0, 0, 0))
    s.line(0, 2, 19, 2, (200, 0, 0), 1.0)
    s.line(0, 7, 19, 7, (0, 0, 200), 1.0)
    assert s.pixel(5, 2) == (200, 0, 0)
    assert s.pixel(5, 7) == (0, 0, 200)


def test_close_marks_unavailable():
    s = Surface(2, 2)
    assert s.available
    s.close()
    assert not s.available


def test_hex_rgb():
    assert hex_rgb("#22c55e") == (0x22, 0xC5, 0x5E)
