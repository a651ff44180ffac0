import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

from storefront.application.interfaces import OrderRepository

logger = logging.getLogger(__name__)

MAX_SEQUENCE = 99999
SEQUENCE_DIGITS = 5


class OrderNumberSequencer:
    """Генератор номеров заказов вида YYMMDD + 5 цифр дневной последовательности.

    Счетчик живет в памяти процесса и восстанавливается из заказа с наибольшим
    номером при первом вызове и при смене дня. Номера уникальны
    только в пределах одного процесса: при нескольких инстансах сервиса
    нужна последовательность на стороне БД.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._clock = clock
        self._lock = asyncio.Lock()
        self._day: Optional[str] = None
        self._next_sequence: Optional[int] = None

    async def next_order_number(self, orders: OrderRepository) -> int:
        async with self._lock:
            day = self._clock().strftime("%y%m%d")

            sequence = self._next_sequence
            if sequence is None or day != self._day:
                sequence = await self._restore_sequence(orders, day)

            if sequence > MAX_SEQUENCE:
                # TODO: проверять коллизии с уже выданными за день номерами после переполнения
                logger.warning(f"Последовательность номеров заказов за {day} переполнена, сброс на 1")
                sequence = 1

            order_number = int(f"{day}{sequence:0{SEQUENCE_DIGITS}d}")
            self._day = day
            self._next_sequence = sequence + 1
            return order_number

    async def _restore_sequence(self, orders: OrderRepository, day: str) -> int:
        last_order = await orders.get_most_recent()
        if last_order is None:
            logger.info("Заказов еще нет, последовательность начинается с 1")
            return 1

        last_number = str(last_order.order_number)
        if last_number[:-SEQUENCE_DIGITS] != day:
            return 1

        last_sequence = int(last_number[-SEQUENCE_DIGITS:])
        logger.info(f"Последовательность восстановлена по заказу {last_order.order_number}")
        return last_sequence + 1
