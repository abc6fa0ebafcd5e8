# store.py
# DynamoDB access for long URL -> short identifier mappings.
# Table layout: one item per mapping, string attributes LongUrl and ShortUrl.

from contextlib import contextmanager
from typing import Iterator, NamedTuple, Optional

import boto3
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError

from .config import Settings
from .errors import IntegrityError, StoreLookupError, StoreWriteError

LONG_URL_ATTR = "LongUrl"
SHORT_URL_ATTR = "ShortUrl"


class Mapping(NamedTuple):
    long_url: str
    short_url: str

    def to_item(self) -> dict:
        return {LONG_URL_ATTR: self.long_url, SHORT_URL_ATTR: self.short_url}

    @classmethod
    def from_item(cls, item: dict) -> Optional["Mapping"]:
        # A record without a ShortUrl value counts as no mapping at all
        short_url = item.get(SHORT_URL_ATTR)
        if not isinstance(short_url, str) or not short_url:
            return None
        return cls(long_url=item.get(LONG_URL_ATTR, ""), short_url=short_url)


@contextmanager
def open_table(settings: Settings) -> Iterator:
    """Yield a DynamoDB Table resource for one invocation and close its client afterwards."""
    dynamodb = boto3.resource(
        "dynamodb",
        region_name=settings.region_name,
        endpoint_url=settings.endpoint_url,
    )
    try:
        yield dynamodb.Table(settings.table_name)
    finally:
        dynamodb.meta.client.close()


class MappingStore:
    def __init__(self, table):
        self.table = table

    def find_by_long_url(self, long_url: str) -> Optional[Mapping]:
        """Return the single mapping recorded for long_url, or None on a miss.

        A single matching record with an empty ShortUrl is also a miss.

        Raises IntegrityError when more than one record matches and
        StoreLookupError when the scan itself fails.
        """
        items = list(self._scan_long_url(long_url))
        if len(items) > 1:
            raise IntegrityError(
                f"Found more than one entry for {long_url!r} ({len(items)} records)"
            )
        if not items:
            return None
        return Mapping.from_item(items[0])

    def put(self, mapping: Mapping) -> None:
        # Plain put: no condition expression, an existing item with the same key is overwritten
        try:
            self.table.put_item(Item=mapping.to_item())
        except (ClientError, BotoCoreError) as e:
            raise StoreWriteError(str(e)) from e

    def _scan_long_url(self, long_url: str) -> Iterator[dict]:
        # The filter is applied per scanned page, so every page has to be read
        params = {"FilterExpression": Attr(LONG_URL_ATTR).eq(long_url)}
        while True:
            try:
                result = self.table.scan(**params)
            except (ClientError, BotoCoreError) as e:
                raise StoreLookupError(str(e)) from e

            yield from result.get("Items", [])

            last_key = result.get("LastEvaluatedKey")
            if not last_key:
                return
            params["ExclusiveStartKey"] = last_key
