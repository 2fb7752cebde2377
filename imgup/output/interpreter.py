"""Upload response interpretation and URL formatting."""

from __future__ import annotations

import json

from imgup.models.request import OutputFormat
from imgup.models.upload import UploadFailure, UploadResult, UploadSuccess

UNKNOWN_API_ERROR = "Unknown API error"
URL_PARSE_ERROR = "Could not parse image URL from the API response"


def _error_message(body: object) -> str:
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            message = error.get("message")
            if isinstance(message, str) and message:
                return message
    return UNKNOWN_API_ERROR


def interpret_response(raw: str) -> UploadResult:
    """
    Turn an upload API response body into an UploadResult.

    A body that is not a JSON object is treated as lacking the ``success``
    flag. A response flagged successful without a usable ``data.url`` is
    still a failure.

    Args:
        raw: Response body text

    Returns:
        UploadResult: UploadSuccess with the direct URL, or UploadFailure
            carrying the reason and the raw body
    """
    try:
        body: object = json.loads(raw)
    except ValueError:
        body = None

    if not isinstance(body, dict) or body.get("success") is not True:
        return UploadFailure(reason=_error_message(body), raw_response=raw)

    data = body.get("data")
    url = data.get("url") if isinstance(data, dict) else None
    if not isinstance(url, str) or url in ("", "null"):
        return UploadFailure(reason=URL_PARSE_ERROR, raw_response=raw)

    return UploadSuccess(url=url)


def format_url(url: str, output_format: OutputFormat) -> str:
    """Render a URL as raw text, a Markdown image or an Org-mode link."""
    if output_format is OutputFormat.MARKDOWN:
        return f"![]({url})"
    if output_format is OutputFormat.ORG:
        return f"[[{url}][]]"
    return url
