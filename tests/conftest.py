from __future__ import annotations

import threading
import time

import pytest

from bucket_deleter.errors import GatewayError
from bucket_deleter.gateway import Container, Page


class FakeGateway:
    """In-memory storage gateway that records every call."""

    def __init__(self, buckets: dict[str, list[list[str]]] | None = None, delay: float = 0.0):
        # bucket name -> pages of keys; the cursor is the index of the next page
        self.buckets = buckets or {}
        self.delay = delay
        self.fail_listing = False
        self.page_failures: set[tuple[str, int]] = set()
        self.delete_failures: set[str] = set()
        self.removal_failures: set[str] = set()
        self.crash_keys: set[str] = set()
        self.hold: threading.Event | None = None

        self.list_calls: list[tuple[str, str | None]] = []
        self.delete_calls: list[tuple[str, str]] = []
        self.completed_deletes: list[tuple[str, str]] = []
        self.removed: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def list_containers(self) -> list[Container]:
        if self.fail_listing:
            raise GatewayError("list_buckets", "Access Denied", "AccessDenied")
        return [Container(name) for name in self.buckets]

    def list_items(self, container: Container, cursor: str | None = None) -> Page:
        self.list_calls.append((container.name, cursor))
        index = int(cursor) if cursor is not None else 0
        if (container.name, index) in self.page_failures:
            raise GatewayError("list_objects_v2", "Internal Error", "InternalError")
        pages = self.buckets[container.name]
        if index >= len(pages):
            return Page(keys=[])
        next_cursor = str(index + 1) if index + 1 < len(pages) else None
        return Page(keys=list(pages[index]), next_cursor=next_cursor)

    def delete_item(self, container: Container, key: str) -> None:
        with self._lock:
            self.delete_calls.append((container.name, key))
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.hold is not None:
                self.hold.wait(timeout=5)
            if self.delay:
                time.sleep(self.delay)
            if key in self.crash_keys:
                raise RuntimeError(f"connection reset while deleting {key}")
            if key in self.delete_failures:
                raise GatewayError("delete_object", "Access Denied", "AccessDenied")
        finally:
            with self._lock:
                self.in_flight -= 1
                self.completed_deletes.append((container.name, key))

    def delete_container(self, container: Container) -> None:
        if container.name in self.removal_failures:
            raise GatewayError("delete_bucket", "The bucket is not empty", "BucketNotEmpty")
        self.removed.append(container.name)


class ScriptedAnswers:
    """Stands in for input(), replaying answers and recording prompts."""

    def __init__(self, *answers: str):
        self.answers = list(answers)
        self.prompts: list[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


def make_pages(prefix: str, *sizes: int) -> list[list[str]]:
    pages = []
    counter = 0
    for size in sizes:
        pages.append([f"{prefix}/{counter + i:04d}" for i in range(size)])
        counter += size
    return pages


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()
