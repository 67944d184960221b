import pytest

from spot.labels import (
    add_to_playlist_label,
    album_by_artist_label,
    markup_escape,
    more_from_label,
    n_songs_selected_label,
)


def test_add_to_playlist_label():
    assert add_to_playlist_label("Chill") == "Add to Chill"


def test_add_to_playlist_label_keeps_braces_in_name():
    assert add_to_playlist_label("{}") == "Add to {}"


@pytest.mark.parametrize(
    "n, expected",
    [(1, "1 song selected"), (0, "0 songs selected"), (3, "3 songs selected")],
)
def test_n_songs_selected_label(n, expected):
    assert n_songs_selected_label(n) == expected


def test_markup_escape_leaves_plain_text():
    assert markup_escape("Plain words 123") == "Plain words 123"


def test_markup_escape_ampersand():
    assert markup_escape("Simon & Garfunkel") == "Simon &amp; Garfunkel"


@pytest.mark.parametrize("text", ["<b>", "a\"b'c", "x > y & z", "tab\x01"])
def test_markup_escape_removes_special_characters(text):
    escaped = markup_escape(text)
    for char in "<>\"'\x01":
        assert char not in escaped


def test_more_from_label_escapes_artist():
    assert more_from_label("Earth & Fire") == "More from " + markup_escape("Earth & Fire")
    assert more_from_label("Plain") == "More from Plain"


def test_album_by_artist_label():
    assert album_by_artist_label("Album", "Artist") == "Album by Artist"
    label = album_by_artist_label("<Odd>", "A & B")
    assert label == markup_escape("<Odd>") + " by " + markup_escape("A & B")
    assert "<" not in label