from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Mapping

from storefront.domain.models import OrderLineItem, ShippingMethod
from storefront.domain.exceptions import InvalidShippingMethodError

CENTS = Decimal("0.01")

DEFAULT_SHIPPING_PRICES: dict[ShippingMethod, Decimal] = {
    ShippingMethod.STANDARD: Decimal("5"),
    ShippingMethod.EXPRESS: Decimal("15"),
    ShippingMethod.OVERNIGHT: Decimal("25"),
}


def calculate_items_price(items: Iterable[OrderLineItem]) -> Decimal:
    """Сумма unit_price * quantity, округление до копеек по ROUND_HALF_UP"""
    total = sum((item.subtotal for item in items), Decimal("0"))
    return total.quantize(CENTS, rounding=ROUND_HALF_UP)


def calculate_shipping_price(
    method,
    prices: Mapping[ShippingMethod, Decimal] = DEFAULT_SHIPPING_PRICES,
) -> Decimal:
    try:
        shipping_method = ShippingMethod(method)
    except ValueError:
        raise InvalidShippingMethodError(method)

    if shipping_method not in prices:
        raise InvalidShippingMethodError(method)
    return Decimal(prices[shipping_method])
