"""Decode text from the page's legacy encoding (EUC-JP).

The page is decoded once, before DOM parsing, so HTML entities expand into
real characters next to already decoded text. Bytes that are not valid
EUC-JP become U+FFFD, as the source site's own decoder does; only the bad
bytes are lost and the rest of the cell stays readable.
"""
import logging
from typing import NamedTuple, Optional

from bbnotify.errors import TextEncodingWarning

logger = logging.getLogger(__name__)

SOURCE_ENCODING = "euc_jp"
REPLACEMENT_CHAR = "\ufffd"


class NormalizedText(NamedTuple):
    """Outcome of normalizing one text fragment."""

    text: str
    warning: Optional[TextEncodingWarning] = None

    @property
    def ok(self) -> bool:
        return self.warning is None


def decode_page(content: bytes, encoding: str = SOURCE_ENCODING) -> str:
    """Decode the whole page, replacing undecodable bytes."""
    html = content.decode(encoding, errors="replace")
    bad = html.count(REPLACEMENT_CHAR)
    if bad:
        logger.warning(f"Page has {bad} bytes that are not valid {encoding}")
    return html


def normalize(raw: str | bytes, encoding: str = SOURCE_ENCODING) -> NormalizedText:
    """
    Decode ``raw`` (bytes) from ``encoding`` and strip surrounding whitespace.

    Text that still carries decoding damage (U+FFFD) is returned unmodified
    together with a TextEncodingWarning.
    """
    if isinstance(raw, bytes):
        try:
            return NormalizedText(raw.decode(encoding).strip())
        except UnicodeDecodeError as e:
            return NormalizedText(raw.decode(encoding, errors="replace"), TextEncodingWarning(raw, e))

    if REPLACEMENT_CHAR in raw:
        return NormalizedText(raw, TextEncodingWarning(raw, f"undecodable {encoding} bytes"))
    return NormalizedText(raw.strip())


def normalize_text(raw: str | bytes, encoding: str = SOURCE_ENCODING) -> str:
    """Normalize and log a warning when the text could not be fully decoded."""
    result = normalize(raw, encoding)
    if result.warning is not None:
        logger.warning(f"{result.warning}, keeping original text {result.text!r}")
    return result.text
