"""Response compressor.

Builds the final list response: serializes the body, negotiates a content
encoding with the client's ``Accept-Encoding``, compresses bodies above the
configured threshold, and always sets ``Cache-Control`` and ``ETag``.
"""

import asyncio
import gzip
import logging
import zlib
from collections.abc import Mapping
from typing import Any

from ledgercache.core.entities.cache_config import CompressionConfig
from ledgercache.core.entities.cache_control import FreshnessPolicy
from ledgercache.core.entities.list_response import EncodedResponse
from ledgercache.core.interfaces.serializer import ISerializer

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"

# Server preference when the client weighs encodings equally.
SUPPORTED_ENCODINGS = ("gzip", "deflate")


def header_value(headers: Mapping[str, str], name: str) -> str | None:
    """Case-insensitive header lookup that works on plain dicts too."""
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, candidate in headers.items():
        if key.lower() == lowered:
            return candidate
    return None


def _parse_accept_encoding(header: str) -> dict[str, float]:
    weights: dict[str, float] = {}
    for item in header.split(","):
        parts = [p.strip() for p in item.split(";")]
        coding = parts[0].lower()
        if not coding:
            continue
        q = 1.0
        for param in parts[1:]:
            name, _, value = param.partition("=")
            if name.strip().lower() == "q":
                try:
                    q = float(value)
                except ValueError:
                    q = 0.0
        weights[coding] = q
    return weights


def negotiate_encoding(accept_encoding: str | None) -> str | None:
    """Pick the best supported encoding for an ``Accept-Encoding`` header.

    Returns:
        ``"gzip"``, ``"deflate"`` or None when the client accepts neither.
        A ``q=0`` entry excludes an encoding; ``*`` covers those not named.
    """
    if not accept_encoding:
        return None

    weights = _parse_accept_encoding(accept_encoding)
    wildcard = weights.get("*", 0.0)

    best: str | None = None
    best_q = 0.0
    for coding in SUPPORTED_ENCODINGS:
        q = weights.get(coding, wildcard)
        if q > best_q:
            best, best_q = coding, q
    return best


def compress(body: bytes, encoding: str, level: int) -> bytes:
    if encoding == "gzip":
        return gzip.compress(body, compresslevel=level)
    if encoding == "deflate":
        return zlib.compress(body, level)
    raise ValueError(f"Unsupported encoding: {encoding}")


class ResponseCompressor:
    """Turns JSON payloads into encoded, cache-annotated responses.

    Compression runs in a worker thread so large bodies do not stall the
    event loop.
    """

    def __init__(
        self,
        serializer: ISerializer,
        config: CompressionConfig | None = None,
    ) -> None:
        self._serializer = serializer
        self._config = config or CompressionConfig()

    @property
    def config(self) -> CompressionConfig:
        return self._config

    async def create_response(
        self,
        payload: Any,
        request_headers: Mapping[str, str],
        *,
        freshness: FreshnessPolicy,
        etag: str | None = None,
        status: int = 200,
    ) -> EncodedResponse:
        """Serialize, maybe compress, and annotate a response.

        Args:
            payload: JSON-serializable body.
            request_headers: Headers of the incoming request.
            freshness: Cache-Control directives to apply.
            etag: Quoted ETag to send, if any.
            status: HTTP status code.

        Returns:
            The encoded response.
        """
        body = self._serializer.serialize(payload)
        original_size = len(body)
        headers = self._cache_headers(freshness, etag)
        headers["Content-Type"] = JSON_CONTENT_TYPE
        headers["Vary"] = "Accept-Encoding"

        encoding = None
        if original_size >= self._config.threshold:
            encoding = negotiate_encoding(header_value(request_headers, "accept-encoding"))

        if encoding is not None:
            try:
                compressed = await asyncio.to_thread(
                    compress, body, encoding, self._config.level
                )
            except Exception:
                logger.warning(
                    "Compression with %s failed, sending uncompressed", encoding,
                    exc_info=True,
                )
            else:
                body = compressed
                headers["Content-Encoding"] = encoding
                headers["X-Compression-Ratio"] = (
                    f"{len(compressed) / original_size:.2f}"
                )

        headers["Content-Length"] = str(len(body))
        return EncodedResponse(status=status, body=body, headers=headers)

    def not_modified(
        self, *, freshness: FreshnessPolicy, etag: str
    ) -> EncodedResponse:
        """Build a 304 response. No body is serialized or compressed."""
        return EncodedResponse(status=304, headers=self._cache_headers(freshness, etag))

    def plain(self, status: int, payload: Mapping[str, Any]) -> EncodedResponse:
        """Build an uncompressed, uncacheable JSON response (errors, admin replies)."""
        body = self._serializer.serialize(dict(payload))
        return EncodedResponse(
            status=status,
            body=body,
            headers={
                "Content-Type": JSON_CONTENT_TYPE,
                "Content-Length": str(len(body)),
                "Cache-Control": FreshnessPolicy.no_store().to_http_header(),
            },
        )

    @staticmethod
    def _cache_headers(freshness: FreshnessPolicy, etag: str | None) -> dict[str, str]:
        headers = {"Cache-Control": freshness.to_http_header()}
        if etag:
            headers["ETag"] = etag
        return headers
