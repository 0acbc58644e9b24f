import unicodedata

import pytest

from idnutil.errors import ErrorCode, IdnError
from idnutil.idna import is_ascii, is_nfc, utf8_to_code_points


def test_is_ascii_on_plain_text():
    assert is_ascii(b"non-idn.example") is True


def test_is_ascii_on_empty():
    assert is_ascii(b"") is True


def test_is_ascii_on_utf8():
    assert is_ascii(b"n\xc3\xa4mchen.example") is False


def test_decode_utf8():
    assert utf8_to_code_points(b"n\xc3\xa4mchen.example", False) == "n\u00e4mchen.example"


def test_decode_without_nfc_keeps_decomposed():
    decomposed = "a\u0308"
    assert utf8_to_code_points(decomposed.encode("utf-8"), False) == decomposed


def test_decode_with_nfc_composes():
    decomposed = "a\u0308"
    result = utf8_to_code_points(decomposed.encode("utf-8"), True)
    assert result == unicodedata.normalize("NFC", decomposed)
    assert is_nfc(result)


def test_nfc_leaves_composed_input_alone():
    text = "bu\u00dfe"
    assert utf8_to_code_points(text.encode("utf-8"), True) == text


def test_invalid_utf8_raises_encoding_error():
    with pytest.raises(IdnError) as info:
        utf8_to_code_points(b"\x80bad.com", False)
    assert info.value.code == ErrorCode.ENCODING_ERROR


def test_encoded_surrogate_rejected():
    with pytest.raises(IdnError) as info:
        utf8_to_code_points(b"\xed\xa0\x80", True)
    assert info.value.code == ErrorCode.ENCODING_ERROR


def test_is_nfc_composed():
    assert is_nfc("n\u00e4mchen") is True


def test_is_nfc_decomposed():
    assert is_nfc("na\u0308mchen") is False


def test_is_nfc_bad_combining_order():
    # dot below (220) after diaeresis (230) is out of canonical order
    assert is_nfc("a\u0308\u0323") is False


def test_is_nfc_accepts_code_points():
    assert is_nfc([0x0062, 0x00FC]) is True
    assert is_nfc([0x0062, 0x0075, 0x0308]) is False


@pytest.mark.parametrize(
    "text", ["\u05e9\u05dd1", "\u03b2\u03cc\u03bb\u03bf\u03c2", "e\u0301", "\u1e0b\u0323"]
)
def test_normalized_output_is_nfc(text):
    result = utf8_to_code_points(text.encode("utf-8"), True)
    assert is_nfc(result)
    assert result == unicodedata.normalize("NFC", text)