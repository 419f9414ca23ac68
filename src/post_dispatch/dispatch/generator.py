"""
Lazy request generator.

Descriptors are built on demand as the pool pulls them, in index order.
The generator is single-pass: once exhausted it stays exhausted, and a
second batch needs a new generator.
"""

from typing import Iterator, Mapping, Optional

from post_dispatch.models.request_models import DEFAULT_HEADERS, PostPayload, RequestDescriptor


class RequestGenerator(Iterator[RequestDescriptor]):
    """
    Finite iterator of identical POST descriptors.

    Attributes:
        url: Destination URL shared by every request
        request_count: Number of descriptors produced in total
    """

    def __init__(
        self,
        url: str,
        payload: PostPayload,
        request_count: int,
        headers: Optional[Mapping[str, str]] = None,
    ):
        if request_count < 0:
            raise ValueError(f"request_count must be >= 0, got {request_count}")

        self.url = url
        self.request_count = request_count
        self._headers = dict(headers if headers is not None else DEFAULT_HEADERS)
        self._body = payload.encode()
        self._next_index = 0

    def __iter__(self) -> "RequestGenerator":
        return self

    def __next__(self) -> RequestDescriptor:
        if self._next_index >= self.request_count:
            raise StopIteration

        descriptor = RequestDescriptor(
            index=self._next_index,
            url=self.url,
            headers=dict(self._headers),
            body=self._body,
        )
        self._next_index += 1
        return descriptor

    def __length_hint__(self) -> int:
        return self.request_count - self._next_index

    @property
    def exhausted(self) -> bool:
        return self._next_index >= self.request_count
