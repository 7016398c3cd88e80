"""Product lookup port (abstract interface).

Checkout resolves cart lines through this contract so the engine never
talks to the catalogue's storage directly.
"""

from abc import ABC, abstractmethod

from catalogue.product.product import Product


class ProductLookup(ABC):
    """Abstract read-only product source."""

    @abstractmethod
    def get(self, product_id: str) -> Product:
        """Return the product or raise ObjectNotFoundError."""
        ...

    def __call__(self, product_id: str) -> Product:
        return self.get(product_id)
