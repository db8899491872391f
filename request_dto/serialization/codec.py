"""Body codecs: bytes to input objects and values to response bytes."""

from typing import Any, Protocol, runtime_checkable

import structlog
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from request_dto.advice import EMPTY_CHAIN, AdviceChain
from request_dto.core.errors import DeserializationError


logger = structlog.get_logger(__name__)

_MALFORMED_JSON = frozenset({"json_invalid", "json_type"})


@runtime_checkable
class BodyCodec(Protocol):
    """Converts between body bytes and typed values."""

    def deserialize(self, data: bytes, target_type: type) -> Any:
        """Decode ``data`` into ``target_type`` or raise DeserializationError."""
        ...

    def serialize(self, value: Any, value_type: type | None = None) -> bytes:
        """Encode ``value`` as body bytes."""
        ...


class JSONBodyCodec:
    """JSON codec built on pydantic TypeAdapters."""

    def __init__(self) -> None:
        self._adapters: dict[Any, TypeAdapter[Any]] = {}

    def _adapter(self, tp: Any) -> TypeAdapter[Any]:
        adapter = self._adapters.get(tp)
        if adapter is None:
            adapter = TypeAdapter(tp)
            self._adapters[tp] = adapter
        return adapter

    def deserialize(self, data: bytes, target_type: type) -> Any:
        try:
            return self._adapter(target_type).validate_json(data)
        except PydanticValidationError as e:
            errors = e.errors(include_url=False)
            malformed = any(err["type"] in _MALFORMED_JSON for err in errors)
            message = (
                "Request body is not valid JSON"
                if malformed
                else f"Request body does not match {target_type.__qualname__}"
            )
            raise DeserializationError(
                message,
                details={
                    "errors": [
                        {
                            "field": ".".join(str(p) for p in err["loc"]),
                            "message": err["msg"],
                            "code": err["type"],
                        }
                        for err in errors
                    ]
                },
            ) from e

    def serialize(self, value: Any, value_type: type | None = None) -> bytes:
        return self._adapter(value_type or type(value)).dump_json(value)


class AdvisedBodyCodec:
    """Applies body advice around another codec."""

    def __init__(self, codec: BodyCodec, chain: AdviceChain | None = None) -> None:
        self.codec = codec
        self.chain = chain if chain is not None else EMPTY_CHAIN

    def deserialize(self, data: bytes, target_type: type) -> Any:
        advice = self.chain.for_request(target_type)
        for a in advice:
            data = a.before_body_read(data, target_type)
        value = self.codec.deserialize(data, target_type)
        for a in advice:
            value = a.after_body_read(value, target_type)
        return value

    def empty_body(self, target_type: type) -> Any | None:
        """First non-None value offered by advice for an empty body."""
        for a in self.chain.for_request(target_type):
            value = a.handle_empty_body(target_type)
            if value is not None:
                logger.debug(
                    "empty_body_handled_by_advice",
                    advice=type(a).__name__,
                    target=target_type.__qualname__,
                    category="advice",
                )
                return value
        return None

    def serialize(self, value: Any, value_type: type | None = None) -> bytes:
        value_type = value_type or type(value)
        for a in self.chain.for_response(value_type):
            value = a.before_body_write(value, value_type)
        return self.codec.serialize(value, value_type)
