"""imgbb API uploader implementation."""

from __future__ import annotations

from typing import BinaryIO, Callable, final

import requests
from requests.exceptions import (
    ConnectionError,
    RequestException,
    Timeout,
)
from requests_toolbelt.multipart.encoder import MultipartEncoder, MultipartEncoderMonitor

from imgup.config import DEFAULT_UPLOAD_TIMEOUT
from imgup.errors import TransportError
from imgup.models.payload import ImagePayload

API_URL = "https://api.imgbb.com/1/upload"

MultipartField = tuple[str, "str | tuple[str, BinaryIO, str]"]


@final
class ImgbbUploader:
    """Builds and sends multipart upload requests to imgbb."""

    def __init__(
        self,
        api_key: str,
        api_url: str = API_URL,
        timeout: float = DEFAULT_UPLOAD_TIMEOUT,
    ) -> None:
        """Initialize the uploader.

        Args:
            api_key: imgbb API key sent with every upload
            api_url: Upload endpoint
            timeout: Seconds to wait for the server
        """
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout

    def build_fields(
        self,
        payload: ImagePayload,
        stream: BinaryIO,
        expiration_seconds: int | None = None,
        custom_name: str | None = None,
    ) -> list[MultipartField]:
        """Assemble the multipart form fields for one upload.

        Optional fields are included only when set.

        Args:
            payload: Image being uploaded
            stream: Open binary stream over the payload bytes
            expiration_seconds: Auto-delete delay, if any
            custom_name: Name to store the image under, if any

        Returns:
            Ordered list of (field name, value) pairs
        """
        fields: list[MultipartField] = [
            ("key", self.api_key),
            ("image", (payload.filename, stream, payload.mime_type)),
        ]
        if expiration_seconds is not None:
            fields.append(("expiration", str(expiration_seconds)))
        if custom_name is not None:
            fields.append(("name", custom_name))
        return fields

    def _make_request(self, data: MultipartEncoder | MultipartEncoderMonitor) -> requests.Response:
        """POST an encoded form, mapping transport failures to TransportError.

        HTTP error statuses are returned rather than raised: imgbb explains
        failures in the JSON body.
        """
        headers = {"Content-Type": data.content_type}
        try:
            return requests.request(
                "POST",
                self.api_url,
                data=data,
                headers=headers,
                timeout=self.timeout,
            )
        except Timeout as e:
            raise TransportError(f"Upload timed out after {self.timeout:g} seconds", str(e)) from e
        except ConnectionError as e:
            raise TransportError(f"Could not connect to {self.api_url}", str(e)) from e
        except RequestException as e:
            raise TransportError("Upload request failed", str(e)) from e

    def upload(
        self,
        payload: ImagePayload,
        expiration_seconds: int | None = None,
        custom_name: str | None = None,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> str:
        """Upload an image and return the raw response body.

        Args:
            payload: Image to upload
            expiration_seconds: Auto-delete delay, if any
            custom_name: Name to store the image under, if any
            progress_callback: Called with (bytes sent, total request bytes)

        Returns:
            Response body text, expected to be JSON

        Raises:
            TransportError: If the request could not be completed
        """
        with payload.open() as stream:
            encoder = MultipartEncoder(
                fields=self.build_fields(payload, stream, expiration_seconds, custom_name)
            )

            # Wrap with monitor if callback provided
            if progress_callback:
                data: MultipartEncoder | MultipartEncoderMonitor = MultipartEncoderMonitor(
                    encoder, lambda monitor: progress_callback(monitor.bytes_read, monitor.len)
                )
            else:
                data = encoder

            response = self._make_request(data)

        return response.text
