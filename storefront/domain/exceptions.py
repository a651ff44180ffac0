class DomainException(Exception):
    code = "domain_error"


class OrderValidationError(DomainException):
    code = "validation_error"


class ProductNotFoundError(DomainException):
    code = "product_not_found"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Товар {product_id} не найден")


class InsufficientStockError(DomainException):
    code = "insufficient_stock"

    def __init__(self, product_id: str, available: int, requested: int):
        self.product_id = product_id
        self.available = available
        self.requested = requested
        super().__init__(
            f"Недостаточно товара {product_id}. Доступно: {available}, требуется: {requested}"
        )


class InvalidShippingMethodError(DomainException):
    code = "invalid_shipping_method"

    def __init__(self, shipping_method):
        self.shipping_method = shipping_method
        super().__init__(f"Неизвестный способ доставки: {shipping_method}")


class StockUpdateConflictError(DomainException):
    code = "stock_update_conflict"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Конфликт при обновлении остатка товара {product_id}")


class StorageUnavailableError(DomainException):
    code = "storage_unavailable"


class TransactionAbortedError(StorageUnavailableError):
    code = "transaction_aborted"
