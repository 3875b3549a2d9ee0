"""Decoding of MIME encoded words found in author, title and snippet fields.

Only ISO-8859 words are recognised, e.g. ``=?ISO-8859-1?Q?Caf=E9?=``. Words
using the Q encoding are unwrapped to their text; any other encoding is
quoted-printable decoded in place and keeps its header.
"""

import codecs
import quopri

MARKERS = ("=?ISO-", "=?iso-")
TERMINATOR = "?="
WIRE_ENCODING = "latin-1"


def qp_decode(text: str, header: bool = False) -> bytes:
    return quopri.decodestring(text.encode(WIRE_ENCODING, errors="replace"), header=header)


def to_text(data: bytes, charset: str) -> str:
    """Decode bytes with the given charset, or keep them as raw bytes if it is unknown."""
    try:
        codecs.lookup(charset)
    except LookupError:
        charset = WIRE_ENCODING
    return data.decode(charset, errors="replace")


def _find_marker(text: str, pos: int) -> int:
    hits = [i for i in (text.find(m, pos) for m in MARKERS) if i >= 0]
    return min(hits) if hits else -1


def _split_header(text: str, marker: int) -> tuple[str, str, int]:
    """Return ``(charset, encoding, payload_start)``, or a payload start of -1 if malformed."""
    charset_end = text.find("?", marker + 2)
    if charset_end < 0 or charset_end + 2 >= len(text) or text[charset_end + 2] != "?":
        return "", "", -1
    return text[marker + 2:charset_end], text[charset_end + 1], charset_end + 3


def decode_encoded_words(text: str) -> str:
    """Replace every ISO-8859 encoded word in ``text`` by its decoded form."""
    parts = []
    pos = 0
    while True:
        marker = _find_marker(text, pos)
        if marker < 0:
            parts.append(text[pos:])
            break
        parts.append(text[pos:marker])

        charset, encoding, payload_start = _split_header(text, marker)
        end = text.find(TERMINATOR, payload_start) if payload_start >= 0 else -1
        if end < 0:
            parts.append(to_text(qp_decode(text[marker:]), WIRE_ENCODING))
            break

        if encoding in "Qq":
            parts.append(to_text(qp_decode(text[payload_start:end], header=True), charset))
        else:
            parts.append(to_text(qp_decode(text[marker:end]), charset))

        pos = end + len(TERMINATOR)
        # whitespace between adjacent encoded words is not part of the text
        if pos < len(text) and text[pos].isspace() and _find_marker(text, pos + 1) == pos + 1:
            pos += 1
    return "".join(parts).strip()
