from abc import ABC, abstractmethod
from typing import Sequence, TypeVar

from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)

QueryParams = Sequence[tuple[str, str]]


class AbstractTransport(ABC):
	"""Interface for transports that fetch and decode registry resources."""

	@abstractmethod
	async def get(
		self,
		path: str,
		model: type[ModelT],
		*,
		params: QueryParams | None = None,
	) -> ModelT:
		"""Fetch a resource and decode its unwrapped payload.

		Args:
			path: Endpoint path relative to the API origin (e.g. "crates/serde").
			model: Pydantic model the success payload is validated into.
			params: Optional ordered query parameters.

		Returns:
			ModelT: The decoded payload.

		Raises:
			RegistryError: A NotFoundError, PermissionDeniedError, ApiError or
				TransportError describing the failure.
		"""
		...

	@abstractmethod
	async def aclose(self) -> None:
		"""Release the underlying HTTP session."""
		...
