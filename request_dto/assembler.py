"""Assembles the intermediate object from body, headers, path and query."""

from typing import Any, TypeVar

import structlog

from request_dto.context import RequestContext
from request_dto.core.errors import DeserializationError
from request_dto.extractors import HeaderExtractor, PathVariableExtractor, QueryParamExtractor
from request_dto.serialization import AdvisedBodyCodec, BodyCodec, JSONBodyCodec


logger = structlog.get_logger(__name__)

T = TypeVar("T")


class IntermediateAssembler:
    """Builds one fully populated intermediate object per request.

    The body is deserialized first (or the type default-constructed when
    there is no body), then headers, path variables and query parameters
    are written into it, in that order.
    """

    def __init__(
        self,
        codec: BodyCodec | None = None,
        header_extractor: HeaderExtractor | None = None,
        path_extractor: PathVariableExtractor | None = None,
        query_extractor: QueryParamExtractor | None = None,
    ) -> None:
        self.codec = codec or JSONBodyCodec()
        self.header_extractor = header_extractor or HeaderExtractor()
        self.path_extractor = path_extractor or PathVariableExtractor()
        self.query_extractor = query_extractor or QueryParamExtractor()

    async def assemble(self, input_type: type[T], context: RequestContext) -> T:
        target = await self.read_input(input_type, context)
        self.header_extractor.extract(target, context.headers)
        self.path_extractor.extract(target, context.path_params)
        self.query_extractor.extract(target, context.query_params)
        return target

    async def read_input(self, input_type: type[T], context: RequestContext) -> T:
        """Deserialize the body, falling back to a default instance."""
        body = await context.read_body()

        value: Any = None
        if body.strip():
            value = self.codec.deserialize(body, input_type)
        elif isinstance(self.codec, AdvisedBodyCodec):
            value = self.codec.empty_body(input_type)

        if value is None:
            logger.debug(
                "input_default_constructed",
                input_type=input_type.__qualname__,
                category="assembler",
            )
            return self._default_instance(input_type)
        return value

    @staticmethod
    def _default_instance(input_type: type[T]) -> T:
        try:
            return input_type()
        except Exception as e:
            raise DeserializationError(
                f"Request body is empty and {input_type.__qualname__} "
                f"cannot be default-constructed: {e}"
            ) from e
