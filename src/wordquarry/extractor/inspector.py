"""
Default content inspector for raw HTTP/1.x responses.
"""

from __future__ import annotations

from typing import List

from .models import ResponseInfo

STATUS_LINE_PREFIX = b"HTTP/"
_HEADER_TERMINATORS = (b"\r\n\r\n", b"\n\n")


class HttpResponseInspector:
    """Splits a raw response into its header lines and body offset.

    The first header line is the status line. Buffers that do not start with
    ``HTTP/`` are treated as a bare body with no headers, and a response whose
    header block is never terminated has an empty body.
    """

    def analyze_response(self, response: bytes) -> ResponseInfo:
        if not response.startswith(STATUS_LINE_PREFIX):
            return ResponseInfo(body_offset=0, headers=[])

        header_end = len(response)
        body_offset = len(response)
        for terminator in _HEADER_TERMINATORS:
            index = response.find(terminator)
            if 0 <= index < header_end:
                header_end = index
                body_offset = index + len(terminator)

        # Header bytes are not guaranteed to be ASCII; latin-1 maps every byte
        block = response[:header_end].decode("iso-8859-1")
        headers: List[str] = [line.rstrip("\r") for line in block.split("\n")]
        return ResponseInfo(body_offset=body_offset, headers=[h for h in headers if h])
