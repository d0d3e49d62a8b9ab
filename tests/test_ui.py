from app.ui import esc


def test_esc_escapes_markup():
    assert esc('<b>"Dr. O\'Neil"</b>') == "&lt;b&gt;&quot;Dr. O&#x27;Neil&quot;&lt;/b&gt;"


def test_esc_keeps_zero_and_drops_none():
    assert esc(0) == "0"
    assert esc(None) == ""
