"""Pytest configuration and fixtures."""

import threading

import pytest

from shortener.config import Settings
from shortener.handler import ShortenerHandler
from shortener.store import MappingStore


def _matches(condition, item):
    if condition is None:
        return True
    expression = condition.get_expression()
    assert expression["operator"] == "=", "fake table only understands equality filters"
    attr, value = expression["values"]
    return item.get(attr.name) == value


class FakeTable:
    """In-memory stand-in for a boto3 DynamoDB Table keyed on ShortUrl."""

    def __init__(self, page_size=None):
        self.items = []
        self.page_size = page_size
        self.scan_calls = []
        self.put_calls = []
        self.scan_error = None
        self.put_error = None
        self.on_scan = None
        self._lock = threading.Lock()

    def add(self, long_url, short_url):
        self.items.append({"LongUrl": long_url, "ShortUrl": short_url})

    def scan(self, FilterExpression=None, ExclusiveStartKey=None, **kwargs):
        self.scan_calls.append({"FilterExpression": FilterExpression, "ExclusiveStartKey": ExclusiveStartKey})
        if self.scan_error is not None:
            raise self.scan_error

        with self._lock:
            items = list(self.items)
        start = ExclusiveStartKey["offset"] if ExclusiveStartKey else 0
        end = len(items) if self.page_size is None else start + self.page_size
        page = items[start:end]
        matched = [dict(item) for item in page if _matches(FilterExpression, item)]
        result = {"Items": matched, "Count": len(matched), "ScannedCount": len(page)}
        if end < len(items):
            result["LastEvaluatedKey"] = {"offset": end}

        if self.on_scan is not None:
            self.on_scan()
        return result

    def put_item(self, Item, **kwargs):
        self.put_calls.append({"Item": dict(Item), **kwargs})
        if self.put_error is not None:
            raise self.put_error
        with self._lock:
            self.items = [i for i in self.items if i.get("ShortUrl") != Item["ShortUrl"]]
            self.items.append(dict(Item))
        return {}


class FakeLambdaContext:
    function_name = "url-shortener"
    memory_limit_in_mb = 128
    invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:url-shortener"
    aws_request_id = "52fdfc07-2182-154f-163f-5f0f9a621d72"


@pytest.fixture
def table():
    return FakeTable()


@pytest.fixture
def settings():
    return Settings(table_name="UrlsTest")


@pytest.fixture
def handler(table, settings):
    return ShortenerHandler(MappingStore(table), settings)


@pytest.fixture
def lambda_context():
    return FakeLambdaContext()


@pytest.fixture
def make_event():
    def _make_event(body, is_base64=False):
        return {
            "httpMethod": "POST",
            "path": "/shorten",
            "body": body,
            "isBase64Encoded": is_base64,
            "requestContext": {"requestId": "c6af9ac6-7b61-11e6-9a41-93e8deadbeef"},
        }

    return _make_event


@pytest.fixture
def aws_credentials(monkeypatch):
    """Dummy credentials so boto3 clients never look for real ones."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
