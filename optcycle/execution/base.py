"""Order intent sinks."""

from abc import ABC, abstractmethod

import structlog

from ..data.models import OrderIntent
from ..logging.config import log_order_intent


class OrderIntentSink(ABC):
    """Receives order intents emitted by the lifecycle controller."""

    def __init__(self, name: str):
        self.name = name
        self.logger = structlog.get_logger(f"execution.sink.{name}")
        self._submit_count = 0

    @abstractmethod
    def submit(self, intent: OrderIntent) -> None:
        """Hand one intent to the execution side."""

    def submit_all(self, intents: list[OrderIntent]) -> None:
        for intent in intents:
            self.submit(intent)
            self._submit_count += 1

    @property
    def submit_count(self) -> int:
        return self._submit_count


class RecordingSink(OrderIntentSink):
    """Keeps every submitted intent in submission order."""

    def __init__(self, name: str = "recording"):
        super().__init__(name)
        self.intents: list[OrderIntent] = []

    def submit(self, intent: OrderIntent) -> None:
        self.intents.append(intent)

    def clear(self) -> None:
        self.intents.clear()


class LoggingSink(OrderIntentSink):
    """Writes each intent to the structured log."""

    def __init__(self, name: str = "log", run_id: str = "default"):
        super().__init__(name)
        self.run_id = run_id

    def submit(self, intent: OrderIntent) -> None:
        log_order_intent(
            self.logger,
            run_id=self.run_id,
            symbol=intent.symbol.value,
            quantity=intent.quantity,
            context={"timestamp": intent.timestamp.isoformat(), "tag": intent.tag}
        )
