"""Per-request view of the sources a DTO is resolved from."""

import inspect
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any

from starlette.datastructures import Headers, QueryParams
from starlette.requests import Request


BodyReader = Callable[[], Awaitable[bytes] | bytes]


async def _no_body() -> bytes:
    return b""


class RequestContext:
    """Headers, path variables, query string and a read-once body.

    Owned by a single request; not shared between concurrent resolutions.
    """

    def __init__(
        self,
        headers: Headers | Mapping[str, str] | Sequence[tuple[str, str]] | None = None,
        path_params: Mapping[str, Any] | None = None,
        query_string: str = "",
        body_reader: BodyReader | None = None,
        body: bytes | None = None,
    ) -> None:
        if isinstance(headers, Headers):
            self.headers = headers
        elif isinstance(headers, Mapping) or headers is None:
            self.headers = Headers(headers=dict(headers or {}))
        else:
            # repeated names keep every value
            self.headers = Headers(
                raw=[
                    (k.lower().encode("latin-1"), v.encode("latin-1"))
                    for k, v in headers
                ]
            )
        self.path_params: dict[str, str] = {
            k: str(v) for k, v in (path_params or {}).items()
        }
        self.query_string = query_string
        self._body_reader = body_reader or _no_body
        self._body = body
        self.body_reads = 0

    @property
    def query_params(self) -> dict[str, str]:
        """Query parameters decoded with standard URL rules; last value wins."""
        return dict(QueryParams(self.query_string))

    @property
    def body_loaded(self) -> bool:
        return self._body is not None

    async def read_body(self) -> bytes:
        """Return the request body, reading the underlying stream only once."""
        if self._body is None:
            result = self._body_reader()
            if inspect.isawaitable(result):
                result = await result
            self.body_reads += 1
            self._body = result or b""
        return self._body

    @classmethod
    def from_request(
        cls, request: Request, body_cache_key: str = "request_dto_body"
    ) -> "RequestContext":
        """Build a context from a Starlette request.

        The body bytes are shared through ``request.state`` so that several
        resolved parameters of one request read the stream once.
        """
        cached = getattr(request.state, body_cache_key, None)

        async def read() -> bytes:
            body = await request.body()
            setattr(request.state, body_cache_key, body)
            return body

        return cls(
            headers=request.headers,
            path_params=request.path_params,
            query_string=request.url.query,
            body_reader=read,
            body=cached,
        )
