"""Tests for EUC-JP text normalization."""
import logging

import pytest

from bbnotify.errors import TextEncodingWarning
from bbnotify.parse.normalize import decode_page, normalize, normalize_text


def test_normalize_bytes():
    """Test EUC-JP bytes are decoded and trimmed."""
    result = normalize("  株式会社テスト \n".encode("euc_jp"))
    assert result.text == "株式会社テスト"
    assert result.ok


def test_normalize_invalid_bytes_warns():
    """Test invalid EUC-JP bytes keep the readable part with a warning."""
    result = normalize("野村".encode("euc_jp") + b"\xff")

    assert result.text.startswith("野村")
    assert "\ufffd" in result.text
    assert isinstance(result.warning, TextEncodingWarning)


def test_normalize_ascii_is_trimmed():
    """Test plain ASCII only loses surrounding whitespace."""
    assert normalize("\t03/15 - 03/20  ").text == "03/15 - 03/20"


def test_normalize_unicode_text_is_trimmed():
    """Test decoded text, including non-breaking spaces, is trimmed without a warning."""
    result = normalize(" 野村證券\xa0")
    assert result.text == "野村證券"
    assert result.ok


def test_normalize_damaged_text_keeps_original():
    """Test text carrying replacement characters is returned unmodified with a warning."""
    raw = " \ufffd\ufffd証券 "
    result = normalize(raw)

    assert result.text == raw
    assert not result.ok
    assert result.warning.raw == raw


def test_normalize_text_logs_warning(caplog):
    """Test the convenience wrapper logs decode damage and continues."""
    with caplog.at_level(logging.WARNING, logger="bbnotify.parse.normalize"):
        text = normalize_text("株\ufffd")

    assert text == "株\ufffd"
    assert "string encoding error" in caplog.text


def test_decode_page_replaces_only_bad_bytes(caplog):
    """Test a bad byte in the page does not spoil the surrounding text."""
    content = "<td>野村".encode("euc_jp") + b"\xff" + "證券</td>".encode("euc_jp")

    with caplog.at_level(logging.WARNING, logger="bbnotify.parse.normalize"):
        html = decode_page(content)

    assert html == "<td>野村\ufffd證券</td>"
    assert "not valid euc_jp" in caplog.text


@pytest.mark.parametrize(
    "text",
    ["03/15", "  03/15 - 03/20 ", "テスト株式会社", " 1,000,000株 ", ""],
)
def test_normalize_is_idempotent(text):
    """Test normalizing twice gives the same result as once."""
    once = normalize_text(text)
    assert normalize_text(once) == once
