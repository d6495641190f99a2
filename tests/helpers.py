from decimal import Decimal


def line(product, quantity: int, price: str | None = None) -> dict:
    """An order line for ``product``, priced at the catalog price unless given."""
    return {
        "product_id": product.id,
        "quantity": quantity,
        "price": Decimal(price) if price is not None else product.price,
    }
