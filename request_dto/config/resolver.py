"""Resolver behaviour settings."""

from pydantic import BaseModel, Field


class ResolverSettings(BaseModel):
    """Settings for the request DTO resolver."""

    body_cache_key: str = Field(
        default="request_dto_body",
        description="Attribute name on request.state holding the cached body bytes",
    )

    reject_missing_required_params: bool = Field(
        default=False,
        description=(
            "Fail resolution when a required query parameter is missing. "
            "Off by default: missing required parameters are only logged."
        ),
    )

    cache_plans: bool = Field(
        default=True,
        description="Cache checked builder plans per declaration after first success",
    )
