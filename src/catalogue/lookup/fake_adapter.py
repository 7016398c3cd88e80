"""In-memory product catalogue for development and testing."""

from shared.errors import ObjectNotFoundError

from catalogue.lookup.port import ProductLookup
from catalogue.product.product import Product


class InMemoryProductCatalogue(ProductLookup):
    """Product lookup backed by a dict, seeded by tests or the dev app."""

    def __init__(self, products: list[Product] | None = None) -> None:
        self._products: dict[str, Product] = {}
        self.lookups: list[str] = []
        for product in products or []:
            self.add(product)

    def add(self, product: Product) -> Product:
        self._products[product.id] = product
        return product

    def get(self, product_id: str) -> Product:
        self.lookups.append(product_id)
        try:
            return self._products[product_id]
        except KeyError:
            raise ObjectNotFoundError({"product_id": [f"Product {product_id} not found"]}) from None

    def reset(self) -> None:
        self._products.clear()
        self.lookups.clear()
