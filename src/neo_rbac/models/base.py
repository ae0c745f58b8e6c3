"""
Base models for API requests and responses.
"""
from typing import Optional, TypeVar, Generic
from datetime import datetime, timezone
from pydantic import BaseModel, Field, ConfigDict


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


class BaseSchema(BaseModel):
    """Base schema with common configuration."""
    
    model_config = ConfigDict(
        from_attributes=True,
        use_enum_values=True,
        validate_assignment=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


T = TypeVar('T')


class APIResponse(BaseSchema, Generic[T]):
    """Standard API response envelope."""
    success: bool = Field(description="Operation success flag")
    data: Optional[T] = Field(None, description="Response data")
    message: Optional[str] = Field(None, description="Response message")
    status_code: int = Field(200, alias="statusCode", description="HTTP status code")
    timestamp: datetime = Field(default_factory=utc_now, description="Response time")
    
    @classmethod
    def success_response(
        cls,
        data: Optional[T] = None,
        message: Optional[str] = None,
        status_code: int = 200
    ) -> "APIResponse[T]":
        """Create a success response."""
        return cls(
            success=True,
            data=data,
            message=message,
            status_code=status_code
        )
