"""
Shared plumbing for resource modules.
"""

from typing import Optional, Type, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from kgiton.errors import ApiError
from kgiton.http_client import HttpClient
from kgiton.logging import get_logger
from kgiton.models import ApiResponse

T = TypeVar("T")


class BaseModule:
    """Stateless façade over the request gateway."""

    name = "module"

    def __init__(self, http_client: HttpClient):
        self.http_client = http_client
        self.logger = get_logger(f"kgiton.{self.name}")

    def _unwrap(self, response: ApiResponse, model: Type[T]) -> Optional[T]:
        """Validate ``response.data`` as ``model``; absent data yields None."""
        if response.data is None:
            return None
        try:
            return TypeAdapter(model).validate_python(response.data)
        except PydanticValidationError as e:
            self.logger.error("Unexpected response shape", model=str(model), error=str(e))
            raise ApiError(
                "Unexpected response shape",
                response.status_code,
                details={"data": response.data, "errors": e.errors(include_url=False)}
            )
