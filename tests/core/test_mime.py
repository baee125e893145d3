import pytest

from core.utils.mime import detect_mime_type, matches_signature


@pytest.mark.parametrize(
    "data,expected",
    [
        (b"\xff\xd8\xff\xe0abc", "image/jpeg"),
        (b"\x89PNG\r\n\x1a\nxxx", "image/png"),
        (b"GIF89a....", "image/gif"),
        (b"RIFF\x00\x00\x00\x00WEBP", "image/webp"),
    ],
)
def test_detect(data, expected) -> None:
    assert detect_mime_type(data) == expected


def test_unrecognized_bytes() -> None:
    assert detect_mime_type(b"random-bytes") is None


def test_matches_declared_type() -> None:
    assert matches_signature(b"\x89PNG\r\n", "image/png")
    assert not matches_signature(b"\xff\xd8\xff\xe0", "image/png")


def test_unknown_declared_type_never_matches() -> None:
    assert not matches_signature(b"\x89PNG\r\n", "image/tiff")
