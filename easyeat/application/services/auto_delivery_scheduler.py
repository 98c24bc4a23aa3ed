"""
Auto-delivery scheduler

One cancellable timer per order id. When a timer fires the callback gets
the order id; a cancelled timer never fires.
"""

import asyncio
import logging
from typing import Callable, Dict, Tuple


class AutoDeliveryScheduler:
    """Cancellable delayed callbacks keyed by order id"""

    def __init__(self, delay_seconds: float, on_due: Callable[[str], None]):
        self._delay_seconds = delay_seconds
        self._on_due = on_due
        self._handles: Dict[str, asyncio.TimerHandle] = {}
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def delay_seconds(self) -> float:
        return self._delay_seconds

    @property
    def pending_order_ids(self) -> Tuple[str, ...]:
        return tuple(self._handles)

    def is_scheduled(self, order_id: str) -> bool:
        return order_id in self._handles

    def schedule(self, order_id: str) -> None:
        """Arm (or re-arm) the timer for an order. Needs a running event loop."""
        self.cancel(order_id)
        loop = asyncio.get_running_loop()
        self._handles[order_id] = loop.call_later(
            self._delay_seconds, self._fire, order_id
        )
        self._logger.info(
            "⏱️ AUTO DELIVERY scheduled for %s in %.1fs", order_id, self._delay_seconds
        )

    def cancel(self, order_id: str) -> bool:
        handle = self._handles.pop(order_id, None)
        if handle is None:
            return False
        handle.cancel()
        self._logger.info("⏹️ AUTO DELIVERY cancelled for %s", order_id)
        return True

    def cancel_all(self) -> None:
        for handle in self._handles.values():
            handle.cancel()
        if self._handles:
            self._logger.info("⏹️ AUTO DELIVERY cancelled %d timers", len(self._handles))
        self._handles.clear()

    def _fire(self, order_id: str) -> None:
        self._handles.pop(order_id, None)
        self._logger.info("⏰ AUTO DELIVERY due for %s", order_id)
        try:
            self._on_due(order_id)
        except Exception:  # pylint: disable=broad-except
            # Runs on the event loop; there is no caller to propagate to
            self._logger.error(
                "💥 AUTO DELIVERY callback failed for %s", order_id, exc_info=True
            )
