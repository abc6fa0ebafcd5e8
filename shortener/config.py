# config.py
# Runtime settings for the shortener Lambda.
# Everything comes from environment variables injected by the deployment.

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_TABLE_NAME = "Urls"

RESPONSE_FORMATS = ("raw", "json")
ERROR_STATUS_MODES = ("typed", "legacy")


@dataclass(frozen=True)
class Settings:
    table_name: str = DEFAULT_TABLE_NAME
    region_name: Optional[str] = None
    endpoint_url: Optional[str] = None
    # raw: body is the bare identifier; json: body is {"url": "<identifier>"}
    response_format: str = "raw"
    # legacy: every failure is a 404; typed: one status code per error kind
    error_status_mode: str = "legacy"

    def __post_init__(self):
        if not self.table_name:
            raise ValueError("table_name must not be empty")
        if self.response_format not in RESPONSE_FORMATS:
            raise ValueError(
                f"response_format must be one of {RESPONSE_FORMATS}, got {self.response_format!r}"
            )
        if self.error_status_mode not in ERROR_STATUS_MODES:
            raise ValueError(
                f"error_status_mode must be one of {ERROR_STATUS_MODES}, got {self.error_status_mode!r}"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            table_name=env.get("TABLE_NAME", DEFAULT_TABLE_NAME),
            region_name=env.get("AWS_REGION") or None,
            endpoint_url=env.get("DYNAMODB_ENDPOINT_URL") or None,
            response_format=env.get("RESPONSE_FORMAT", "raw").lower(),
            error_status_mode=env.get("ERROR_STATUS_MODE", "legacy").lower(),
        )
