"""
Common response models and utilities.

Shared base schema and error schema for the HTTP API.

Dependencies: pydantic
System role: Common API response structures
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema exchanging camelCase JSON while keeping snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(BaseModel):
    """Error response schema."""

    detail: str = Field(description="Error message")
