# handler.py
# Triggered by: POST /shorten (API Gateway proxy integration)
# Input body:  { "url": "https://some-long-url.com" }
# Output:      the short identifier, e.g. 01J9Z3K8M2Q4W6E8R0T2Y4V6H8
#
# The same long URL always comes back with the identifier it got the first time.

import base64
import binascii
import json
from typing import Callable, Optional

from aws_lambda_powertools import Logger
from aws_lambda_powertools.logging import correlation_paths

from .config import Settings
from .errors import DecodeError, ShortenerError, StoreLookupError, StoreWriteError, status_for
from .ids import new_ulid
from .store import Mapping, MappingStore, open_table

logger = Logger(service="url-shortener")


def decode_long_url(event: dict) -> str:
    """Pull the long URL out of an API Gateway proxy event.

    A JSON object without "url" (or a literal null body) yields the empty
    string, which is a valid key like any other.
    """
    raw = event.get("body")
    if raw is None or raw == "":
        raise DecodeError("Request body is empty")
    if not isinstance(raw, str):
        raise DecodeError("Request body must be a JSON string")

    if event.get("isBase64Encoded"):
        try:
            raw = base64.b64decode(raw, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise DecodeError(f"Request body is not valid base64 UTF-8: {e}") from e

    try:
        body = json.loads(raw)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Request body must be valid JSON: {e}") from e

    if body is None:
        return ""
    if not isinstance(body, dict):
        raise DecodeError(f"Request body must be a JSON object, got {type(body).__name__}")

    long_url = body.get("url")
    if long_url is None:
        return ""
    if not isinstance(long_url, str):
        raise DecodeError(f"url must be a string, got {type(long_url).__name__}")
    return long_url


class ShortenerHandler:
    def __init__(
        self,
        store: MappingStore,
        settings: Settings,
        new_id: Callable[[], str] = new_ulid,
    ):
        self.store = store
        self.settings = settings
        self.new_id = new_id

    def resolve(self, long_url: str) -> str:
        """Return the short identifier for long_url, minting and storing one on a miss.

        Two invocations racing on the same unseen URL can both miss and both
        write; the duplicates then show up as an IntegrityError on later lookups.
        """
        existing = self.store.find_by_long_url(long_url)
        if existing is not None:
            logger.info("Reusing existing short URL", extra={"short_url": existing.short_url})
            return existing.short_url

        mapping = Mapping(long_url=long_url, short_url=self.new_id())
        self.store.put(mapping)
        logger.info(
            "Created new short URL",
            extra={"short_url": mapping.short_url, "long_url": long_url},
        )
        return mapping.short_url

    def handle(self, event: dict) -> dict:
        try:
            long_url = decode_long_url(event)
            short_url = self.resolve(long_url)
        except ShortenerError as e:
            if isinstance(e, (StoreLookupError, StoreWriteError)):
                logger.error("Store operation failed", extra={"kind": e.kind, "reason": e.message})
            else:
                logger.warning("Request rejected", extra={"kind": e.kind, "reason": e.message})
            return self._error_response(e)

        if self.settings.response_format == "json":
            return _response(200, json.dumps({"url": short_url}), _json_headers())
        return _response(200, short_url, _json_headers())

    def _error_response(self, error: ShortenerError) -> dict:
        status_code = status_for(error, self.settings.error_status_mode)
        if self.settings.response_format == "json":
            body = json.dumps({"error": error.message, "kind": error.kind})
            return _response(status_code, body, _json_headers())
        return _response(status_code, error.message)


@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
def lambda_handler(event, context):
    settings = Settings.from_env()
    with open_table(settings) as table:
        handler = ShortenerHandler(MappingStore(table), settings)
        return handler.handle(event)


def _json_headers() -> dict:
    return {"Content-Type": "application/json"}


def _response(status_code: int, body: str, headers: Optional[dict] = None) -> dict:
    # API Gateway proxy response shape; error responses in raw mode carry no headers
    response = {
        "statusCode": status_code,
        "isBase64Encoded": False,
        "body": body,
    }
    if headers:
        response["headers"] = headers
    return response
