"""
File extension sniffing for downloaded media.
"""

import mimetypes


# (offset, signature, extension), checked in order
MAGIC_SIGNATURES: list[tuple[int, bytes, str]] = [
    (0, b"\xff\xd8\xff", ".jpg"),
    (0, b"\x89PNG\r\n\x1a\n", ".png"),
    (0, b"GIF87a", ".gif"),
    (0, b"GIF89a", ".gif"),
    (0, b"%PDF", ".pdf"),
    (0, b"PK\x03\x04", ".zip"),
    (0, b"\x1f\x8b", ".gz"),
    (0, b"Rar!\x1a\x07", ".rar"),
    (0, b"7z\xbc\xaf\x27\x1c", ".7z"),
    (0, b"II*\x00", ".tiff"),
    (0, b"MM\x00*", ".tiff"),
    (0, b"\x00\x00\x01\x00", ".ico"),
    (0, b"#!AMR", ".amr"),
    (0, b"ID3", ".mp3"),
    (0, b"\xff\xfb", ".mp3"),
    (0, b"OggS", ".ogg"),
    (0, b"fLaC", ".flac"),
    (4, b"ftyp", ".mp4"),
    (0, b"BM", ".bmp"),
]

# RIFF containers carry their type at offset 8
RIFF_TYPES = {
    b"WEBP": ".webp",
    b"WAVE": ".wav",
    b"AVI ": ".avi",
}


def sniff_extension(content: bytes) -> str:
    """Return the extension matching the content's magic bytes, or ""."""
    if content[:4] == b"RIFF":
        return RIFF_TYPES.get(content[8:12], "")

    for offset, signature, extension in MAGIC_SIGNATURES:
        if content[offset:offset + len(signature)] == signature:
            return extension
    return ""


def guess_extension(content: bytes, content_type: str | None = None) -> str:
    """
    Guess a file extension for a response body.

    Magic bytes win; the Content-Type is only consulted when the content
    itself is not recognised.

    Args:
        content: Raw body
        content_type: Content-Type header value, parameters allowed

    Returns:
        Extension including the leading dot, or "" if unknown
    """
    extension = sniff_extension(content)
    if extension:
        return extension

    if content_type:
        mime = content_type.split(";", 1)[0].strip().lower()
        if mime:
            return mimetypes.guess_extension(mime) or ""
    return ""
