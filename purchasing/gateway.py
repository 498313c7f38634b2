"""
Submission gateway: the collaborator that durably records a validated purchase.

The controller only depends on SubmissionGateway.submit(). SimulatedGateway
stands in for the backend until a real one exists: it waits a fixed delay and
acknowledges (or fails, when told to).
"""
import asyncio
import itertools
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional

from models.purchase_order import OrderSnapshot
from models.result import GatewayAck, GatewayError, GatewayResult

logger = logging.getLogger(__name__)


class SubmissionGateway(ABC):
    """
    Interface for recording a purchase.

    Implementations report failure by returning a GatewayError. Exceptions that
    escape are converted to a GatewayError by the controller.
    """

    @abstractmethod
    async def submit(self, snapshot: OrderSnapshot) -> GatewayResult:
        """Record *snapshot*; return a GatewayAck or a GatewayError."""


class SimulatedGateway(SubmissionGateway):
    """
    Waits *delay_seconds*, then acknowledges with a sequential reference.

    Set fail_with to a message to make every submission fail instead.
    """

    def __init__(self, delay_seconds: float = 1.5, fail_with: Optional[str] = None):
        self.delay_seconds = delay_seconds
        self.fail_with = fail_with
        self.recorded: list[OrderSnapshot] = []
        self._sequence = itertools.count(1)

    async def submit(self, snapshot: OrderSnapshot) -> GatewayResult:
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

        if self.fail_with:
            logger.warning("Simulated gateway refusing purchase: %s", self.fail_with)
            return GatewayError(message=self.fail_with, retryable=True)

        self.recorded.append(snapshot)
        reference = f"PUR-{next(self._sequence):05d}"
        logger.info(
            "Simulated gateway recorded %s: %d item(s), total %s",
            reference, len(snapshot.items), snapshot.order_total,
        )
        return GatewayAck(
            reference=reference,
            recorded_at=datetime.now(timezone.utc).isoformat(),
        )
