from delve.dungeon.render import LEGEND, render_ascii, render_rows, tile_char


def test_dimensions_match_grid(dungeon_12345):
    rows = render_rows(dungeon_12345)
    assert len(rows) == dungeon_12345.height
    assert all(len(r) == dungeon_12345.width for r in rows)
    assert render_ascii(dungeon_12345) == "\n".join(rows)


def test_border_is_solid(dungeon_12345):
    rows = render_rows(dungeon_12345)
    assert set(rows[0]) == {"#"}
    assert set(rows[-1]) == {"#"}
    assert all(r[0] == "#" and r[-1] == "#" for r in rows)


def test_markers_present(dungeon_12345):
    d = dungeon_12345
    assert tile_char(d, *d.player_start) == "@"
    if d.stairs != d.player_start:
        assert tile_char(d, *d.stairs) == ">"
    for door in d.doors:
        assert tile_char(d, door.x, door.y) == ("L" if door.locked else "+")


def test_only_known_glyphs(dungeon_12345):
    glyphs = set(render_ascii(dungeon_12345)) - {"\n"}
    assert glyphs <= set(LEGEND)
