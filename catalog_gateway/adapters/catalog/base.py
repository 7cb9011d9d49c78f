from abc import ABC, abstractmethod

from catalog_gateway.schemas.product import Product


class AbstractCatalogClient(ABC):
	"""Interface for clients of the remote product catalog.

	Implementations make exactly one upstream attempt per call and raise
	``UpstreamAppError`` on any failure; they never cache.
	"""

	@abstractmethod
	async def list_products(self) -> tuple[Product, ...]:
		"""Fetch the full product collection.

		Returns:
			tuple[Product, ...]: Every product, validated.

		Raises:
			UpstreamAppError: On transport failure or payload schema mismatch.
		"""
		...

	@abstractmethod
	async def get_product(self, product_id: int) -> Product:
		"""Fetch a single product.

		Args:
			product_id: Upstream product identifier.

		Returns:
			Product: The validated record.

		Raises:
			UpstreamAppError: On transport failure, missing record or schema mismatch.
		"""
		...

	async def aclose(self) -> None:
		"""Release any transport resources owned by the client."""
		return None
