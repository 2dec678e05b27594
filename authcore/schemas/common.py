"""
Common schema types used across the service.
"""

from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, model_validator

T = TypeVar("T")


class ResponseStatus(str, Enum):
    """Outcome of a service operation."""
    SUCCESS = "Success"
    FAILED = "Failed"


class ServiceResponse(BaseModel, Generic[T]):
    """
    Uniform result envelope returned by every service operation.
    
    status_code mirrors HTTP semantics so the API layer can return it as is.
    """
    
    status: ResponseStatus
    message: str
    data: Optional[T] = None
    status_code: int
    
    @model_validator(mode="after")
    def check_consistency(self) -> "ServiceResponse[T]":
        if self.status == ResponseStatus.SUCCESS:
            if not 200 <= self.status_code < 300:
                raise ValueError("Success requires a 2xx status code")
        else:
            if self.data is not None:
                raise ValueError("Failed responses carry no data")
            if self.status_code < 400:
                raise ValueError("Failed requires a 4xx or 5xx status code")
        return self
    
    @property
    def success(self) -> bool:
        return self.status == ResponseStatus.SUCCESS
    
    @classmethod
    def ok(cls, message: str, data: Optional[T] = None, status_code: int = 200) -> "ServiceResponse[T]":
        return cls(status=ResponseStatus.SUCCESS, message=message, data=data, status_code=int(status_code))
    
    @classmethod
    def failed(cls, message: str, status_code: int) -> "ServiceResponse[T]":
        return cls(status=ResponseStatus.FAILED, message=message, status_code=int(status_code))


class HealthResponse(BaseModel):
    """Health check response."""
    
    status: str = "ok"
    version: str
    database: str = "connected"
