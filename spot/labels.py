"""Translatable labels shown in the user interface."""

from __future__ import annotations

import gettext

_translation = gettext.translation("spot", fallback=True)
_ = _translation.gettext

# Part of a track's context menu: view the album containing the track.
VIEW_ALBUM = _("View album")
# Part of a track's context menu: copy the public link to the track.
COPY_LINK = _("Copy link")
# Part of a track's context menu: add the track at the end of the play queue.
ADD_TO_QUEUE = _("Add to queue")
# Part of a track's context menu: remove the track from the play queue.
REMOVE_FROM_QUEUE = _("Remove from queue")

_MARKUP_ENTITIES = {"&": "&amp;", "<": "&lt;", ">": "&gt;", "'": "&apos;", '"': "&quot;"}


def _is_escaped_control(code: int) -> bool:
    return (
        0x1 <= code <= 0x8
        or code in (0xB, 0xC)
        or 0xE <= code <= 0x1F
        or 0x7F <= code <= 0x84
        or 0x86 <= code <= 0x9F
    )


def _escape_char(char: str) -> str:
    if char in _MARKUP_ENTITIES:
        return _MARKUP_ENTITIES[char]
    code = ord(char)
    if _is_escaped_control(code):
        return f"&#x{code:x};"
    return char


def markup_escape(text: str) -> str:
    """Escape text so that it can be placed inside Pango markup."""
    return "".join(_escape_char(char) for char in text)


def _fill(template: str, *args: object) -> str:
    """Replace each "{}" in the template with the next argument."""
    parts = template.split("{}")
    values = iter(args)
    out = [parts[0]]
    for part in parts[1:]:
        out.append(str(next(values, "{}")))
        out.append(part)
    return "".join(out)


def add_to_playlist_label(playlist: str) -> str:
    return _fill(_("Add to {}"), playlist)


def n_songs_selected_label(n: int) -> str:
    return _fill(_translation.ngettext("{} song selected", "{} songs selected", n), n)


def more_from_label(artist: str) -> str:
    return _fill(_("More from {}"), markup_escape(artist))


def album_by_artist_label(album: str, artist: str) -> str:
    return _fill(_("{} by {}"), markup_escape(album), markup_escape(artist))