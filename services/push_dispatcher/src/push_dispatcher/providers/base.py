"""Abstract push gateway interface and the values that cross it."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class AndroidHints:
    """Android delivery options attached to a push message."""

    priority: str = "high"
    notification_priority: str = "max"
    channel_id: str | None = None
    icon: str | None = None
    color: str | None = None
    sound: str | None = None
    default_vibrate_timings: bool = False
    default_sound: bool = False


@dataclass(frozen=True, slots=True)
class ApnsHints:
    """APNs ``aps`` dictionary options."""

    sound: str = "default"
    badge: int = 1
    content_available: bool = False


@dataclass(frozen=True, slots=True)
class PushMessage:
    """Provider-neutral push message (no addressing)."""

    title: str
    body: str
    data: dict[str, str]
    android: AndroidHints = field(default_factory=AndroidHints)
    apns: ApnsHints = field(default_factory=ApnsHints)


@dataclass(frozen=True, slots=True)
class SendResult:
    """Outcome of sending to a single device token."""

    token: str
    success: bool
    message_id: str | None = None
    error_code: str | None = None
    error_message: str | None = None


@dataclass(frozen=True, slots=True)
class BatchResult:
    """Outcome of one multicast call, one SendResult per token in order."""

    results: list[SendResult]

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failure_count(self) -> int:
        return len(self.results) - self.success_count

    @property
    def failures(self) -> list[SendResult]:
        return [r for r in self.results if not r.success]


class GatewayError(Exception):
    """A gateway call failed as a whole (nothing was sent)."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class PushGateway(ABC):
    """Base class for push delivery gateways."""

    @abstractmethod
    def send_to_tokens(
        self, tokens: Sequence[str], message: PushMessage
    ) -> BatchResult:
        """Send *message* to up to 500 device tokens.

        Per-token failures are reported in the result. Raises GatewayError
        when the call as a whole fails.
        """

    @abstractmethod
    def send_to_topic(self, topic: str, message: PushMessage) -> str:
        """Send *message* to a topic and return the gateway message id.

        Raises GatewayError on failure.
        """
