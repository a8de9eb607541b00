"""
HTTP response wrapper.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import hashlib
import logging
import os
import re
from pathlib import Path
from typing import Any

import httpx

from httpsupport.exceptions import DecodeError, InvalidArgumentError, InvalidMediaError
from httpsupport.http.filetypes import guess_extension
from httpsupport.http.formats import decode, detect_format

logger = logging.getLogger(__name__)

_DISPOSITION_FILENAME = re.compile(r'filename="(?P<filename>.*?)"')

# Status codes that come without a body
EMPTY_STATUS_CODES = (201, 204, 304)


class HTTPResponse:
    """
    Wraps an httpx.Response.

    The body is read once when the wrapper is built. Structured data is
    decoded on first access to `data` and cached, including a decode
    failure, which is raised again on every later access.
    """

    def __init__(self, response: httpx.Response):
        self._raw_response = response
        self._content: bytes = response.content

        self._format: str | None = None
        self._format_detected = False
        self._data: Any = None
        self._data_error: Exception | None = None
        self._decoded = False

    def __repr__(self) -> str:
        return f"<HTTPResponse [{self.status_code}]>"

    def __str__(self) -> str:
        return self.to_string()

    @property
    def raw_response(self) -> httpx.Response:
        return self._raw_response

    @property
    def status_code(self) -> int:
        return self._raw_response.status_code

    @property
    def reason_phrase(self) -> str:
        return self._raw_response.reason_phrase

    @property
    def headers(self) -> httpx.Headers:
        return self._raw_response.headers

    def has_header(self, name: str) -> bool:
        return name in self._raw_response.headers

    def header_line(self, name: str) -> str:
        """All values of a header joined by ", " ("" if absent)."""
        return ", ".join(self._raw_response.headers.get_list(name))

    @property
    def content(self) -> bytes:
        """Raw body."""
        return self._content

    @property
    def text(self) -> str:
        """Body decoded with the response charset."""
        return self._raw_response.text

    def to_string(self) -> str:
        return self.text

    @property
    def content_type(self) -> str:
        return self.header_line("Content-Type")

    @property
    def server(self) -> str:
        if self.has_header("Server"):
            return self.header_line("Server")
        return "Unknown"

    @property
    def format(self) -> str | None:
        """Detected body format: "json", "urlencoded", "xml" or None."""
        if not self._format_detected:
            self._format = detect_format(self.content_type, self.text)
            self._format_detected = True
        return self._format

    @property
    def data(self) -> Any:
        """
        Body decoded according to its detected format.

        Returns None when the format cannot be detected.

        Raises:
            DecodeError: If the body is malformed for its detected format
        """
        if not self._decoded:
            self._decoded = True
            fmt = self.format
            try:
                self._data = decode(fmt, self.text)
            except DecodeError as e:
                self._data_error = e
                logger.debug(f"Failed to decode {fmt} body ({self.status_code}): {e}")

        if self._data_error is not None:
            raise self._data_error
        return self._data

    @property
    def is_ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def is_invalid(self) -> bool:
        return self.status_code < 100 or self.status_code >= 600

    @property
    def is_redirection(self) -> bool:
        return 300 <= self.status_code < 400

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        return 500 <= self.status_code < 600

    @property
    def is_forbidden(self) -> bool:
        return self.status_code == 403

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_empty(self) -> bool:
        return self.status_code in EMPTY_STATUS_CODES

    def _filename_from_headers(self) -> str | None:
        match = _DISPOSITION_FILENAME.search(self.header_line("Content-Disposition"))
        if match and match.group("filename"):
            # Header values must not escape the target directory
            name = Path(match.group("filename")).name
            if name not in ("", ".", ".."):
                return name
        return None

    def save(self, directory: str | os.PathLike, filename: str = "", append_suffix: bool = True) -> str:
        """
        Save the body as a media file.

        Args:
            directory: Target directory, created if missing
            filename: File name; defaults to the Content-Disposition
                filename, then to the MD5 of the body
            append_suffix: Append an extension sniffed from the body when
                the file name has none

        Returns:
            The file name written inside directory

        Raises:
            InvalidArgumentError: If the directory cannot be created or written
            InvalidMediaError: If the body is empty or looks like a JSON payload
        """
        directory = str(directory).rstrip("/") or "/"
        path = Path(directory)

        if not path.is_dir():
            try:
                path.mkdir(mode=0o755, parents=True)
            except OSError as e:
                raise InvalidArgumentError(f"'{directory}' is not writable.") from e

        if not os.access(path, os.W_OK):
            raise InvalidArgumentError(f"'{directory}' is not writable.")

        # JSON here is an API error instead of the expected media
        if not self._content or self._content[:1] == b"{":
            raise InvalidMediaError("Invalid media response content.")

        if not filename:
            filename = self._filename_from_headers() or hashlib.md5(self._content).hexdigest()

        if append_suffix and not Path(filename).suffix:
            filename += guess_extension(self._content, self.content_type)

        (path / filename).write_bytes(self._content)
        logger.info(f"Saved {len(self._content)} bytes to {path / filename}")

        return filename

    def save_as(self, directory: str | os.PathLike, filename: str, append_suffix: bool = True) -> str:
        """Save the body under an explicit file name."""
        return self.save(directory, filename, append_suffix)
