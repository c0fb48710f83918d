"""Collaborator interfaces used by the transfer dialog.

The dialog never reaches for global notification or routing facilities; the
host injects objects satisfying these protocols.
"""

from typing import Any, Mapping, Protocol, Union

from patient_transfer.models.transfer import TransferRequest, TransferResponse


class TransferTransport(Protocol):
    """Sends transfer requests.

    Implementations return a TransferResponse or the decoded JSON mapping, and
    raise TransportError (or any exception) on failure; the dialog turns the
    exception into a single error notification.
    """

    async def transfer(
        self, request: TransferRequest
    ) -> Union[TransferResponse, Mapping[str, Any]]: ...


class NotificationSink(Protocol):
    """Fire-and-forget operator notifications."""

    def notify_success(self, message: str) -> None: ...

    def notify_error(self, message: str) -> None: ...


class Navigator(Protocol):
    """Moves the host to another view."""

    def go_to(self, path: str) -> None: ...
