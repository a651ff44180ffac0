import logging
from fastapi import APIRouter, Depends, HTTPException, status

from storefront.presentation.schemas import CreateOrderRequest, OrderResponse, ErrorResponse, ErrorDetail
from storefront.application.create_order import CreateOrderUseCase, CreateOrderDTO, OrderItemDTO
from storefront.application.order_numbers import OrderNumberSequencer
from storefront.domain.models import ShippingAddress
from storefront.domain.exceptions import (
    DomainException,
    OrderValidationError,
    ProductNotFoundError,
    InsufficientStockError,
    InvalidShippingMethodError,
    StockUpdateConflictError,
    StorageUnavailableError
)
from storefront.infrastructure.unit_of_work import UnitOfWork
from storefront.database import AsyncSessionLocal
from storefront.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()

# Один генератор номеров на процесс
order_sequencer = OrderNumberSequencer()


def get_unit_of_work():
    return UnitOfWork(AsyncSessionLocal)


def get_order_sequencer() -> OrderNumberSequencer:
    return order_sequencer


def get_create_order_use_case(
    uow=Depends(get_unit_of_work),
    sequencer: OrderNumberSequencer = Depends(get_order_sequencer)
):
    return CreateOrderUseCase(uow, sequencer, settings.SHIPPING_PRICES)


def _error_detail(error: DomainException) -> dict:
    detail = ErrorDetail(error=error.code, message=str(error))
    if isinstance(error, (ProductNotFoundError, InsufficientStockError, StockUpdateConflictError)):
        detail.product_id = error.product_id
    if isinstance(error, InsufficientStockError):
        detail.available = error.available
        detail.requested = error.requested
    return detail.model_dump(exclude_none=True)


@router.post(
    "/orders",
    response_model=OrderResponse,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse}
    },
    status_code=status.HTTP_201_CREATED
)
async def create_order(
    request: CreateOrderRequest,
    use_case: CreateOrderUseCase = Depends(get_create_order_use_case)
):
    """Создать новый заказ"""
    try:
        dto = CreateOrderDTO(
            user_id=request.user_id,
            items=[OrderItemDTO(product_id=item.product_id, quantity=item.quantity) for item in request.items],
            shipping_address=ShippingAddress(**request.shipping_address.model_dump()),
            shipping_method=request.shipping_method.value,
            contact_phone=request.contact_phone
        )
        order = await use_case(dto)
        return OrderResponse.from_domain(order)

    except (OrderValidationError, ProductNotFoundError, InsufficientStockError, InvalidShippingMethodError) as e:
        logger.warning(f"Заказ отклонен: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_error_detail(e))
    except StockUpdateConflictError as e:
        logger.warning(f"Конфликт остатков: {e}")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_error_detail(e))
    except StorageUnavailableError as e:
        logger.error(f"Ошибка хранилища при создании заказа: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=_error_detail(e))
