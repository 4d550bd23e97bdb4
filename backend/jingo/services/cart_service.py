"""
Cart quoting

Re-prices a client-side cart against the live catalog before checkout.
"""
import logging
from typing import Dict, List

from jingo.domain.cart import Cart, CartItem
from jingo.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class CartService:

    def __init__(self, product_repo: ProductRepository = None):
        self.product_repo = product_repo or ProductRepository()

    def quote(self, lines: List[Dict]) -> Dict:
        """
        Build a priced cart from `[{"product_id", "quantity"}, ...]`

        - Products that are missing or not ACTIVE are dropped
        - Tracked inventory caps the quantity at the stock level
        - Repeated product ids are merged

        Returns:
            Cart dict plus a list of human-readable warnings
        """
        product_ids = list({line["product_id"] for line in lines})
        products = self.product_repo.find_by_ids(product_ids)

        cart = Cart()
        warnings = []

        for line in lines:
            product = products.get(line["product_id"])
            if product is None or product.status != "ACTIVE":
                warnings.append(f"Product {line['product_id']} is no longer available and was removed")
                continue

            cart.add(
                CartItem(product_id=product.id, sku=product.sku, name=product.name, price=product.price),
                quantity=line["quantity"],
            )

        for item in list(cart.items):
            product = products[item.product_id]
            if not product.track_inventory or item.quantity <= product.stock_quantity:
                continue

            if product.stock_quantity <= 0:
                cart.remove(item.product_id)
                warnings.append(f"{item.name} is out of stock and was removed")
            else:
                cart.update_quantity(item.product_id, product.stock_quantity)
                warnings.append(f"Only {product.stock_quantity} of {item.name} available; quantity adjusted")

        if warnings:
            logger.info(f"Cart quote adjusted {len(warnings)} line(s)")

        result = cart.to_dict()
        result["warnings"] = warnings
        return result
