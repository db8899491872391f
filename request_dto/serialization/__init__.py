"""Body serialization."""

from .codec import AdvisedBodyCodec, BodyCodec, JSONBodyCodec


__all__ = ["AdvisedBodyCodec", "BodyCodec", "JSONBodyCodec"]
