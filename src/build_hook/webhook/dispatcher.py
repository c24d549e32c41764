"""Signature checking and event dispatch for GitHub webhooks."""

import inspect
import logging
from collections.abc import Awaitable, Callable
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from build_hook.webhook.errors import (
    CallbackError,
    InvalidSignatureError,
    MissingSignatureError,
    PayloadDecodeError,
    UnknownEventError,
)
from build_hook.webhook.models import GitHubEvent, PushEvent, ReleaseEvent, WebhookPayload
from build_hook.webhook.validator import validate_github_signature

logger = logging.getLogger(__name__)

# A callback signals failure by raising
Callback = Callable[[Any], Awaitable[None] | None]

_PAYLOAD_MODELS: dict[GitHubEvent, type[PushEvent] | type[ReleaseEvent]] = {
    GitHubEvent.PUSH: PushEvent,
    GitHubEvent.RELEASE: ReleaseEvent,
}


async def _noop(_payload: Any) -> None:
    return None


class GitHubWebhook:
    """
    Verify and dispatch GitHub webhook deliveries.

    An instance is built once at startup and never mutated afterwards, so a
    single instance can serve concurrent requests.
    """

    def __init__(
        self,
        secret: str,
        push_callback: Callback | None = None,
        release_callback: Callback | None = None,
    ) -> None:
        if not secret:
            raise ValueError("webhook secret is required")

        self._secret = secret
        self._callbacks = MappingProxyType(
            {
                GitHubEvent.PUSH: push_callback or _noop,
                GitHubEvent.RELEASE: release_callback or _noop,
            }
        )

    def verify(self, body: bytes, signature: str | None) -> None:
        """Raise unless ``signature`` matches ``body``."""
        if not signature:
            logger.warning("Signature is missing")
            raise MissingSignatureError("signature is missing")

        if not validate_github_signature(body, signature, self._secret):
            logger.warning(f"Invalid signature: {signature}")
            raise InvalidSignatureError(f"invalid signature: {signature}")

    def decode(self, event: GitHubEvent, body: bytes) -> WebhookPayload:
        """Parse the raw body into the model for ``event``."""
        model = _PAYLOAD_MODELS.get(event)
        if model is None:
            raise UnknownEventError(f"no payload model for event: {event.value}")

        try:
            return model.model_validate_json(body)
        except ValidationError as e:
            logger.warning(f"Failed to decode {event.value} payload: {e}")
            raise PayloadDecodeError(str(e)) from e

    async def dispatch(self, event: GitHubEvent, body: bytes) -> None:
        """
        Route an already verified delivery to its callback.

        Raises:
            UnknownEventError: The event label is not handled
            PayloadDecodeError: The body does not fit the event's model
            CallbackError: The callback raised
        """
        if event is GitHubEvent.PING:
            logger.info("Received ping")
            return
        elif event is GitHubEvent.PUSH or event is GitHubEvent.RELEASE:
            payload = self.decode(event, body)
            await self._invoke(event, payload)
        else:
            logger.warning(f"Unexpected event: {event.value}")
            raise UnknownEventError(f"unexpected event: {event.value}")

    async def _invoke(self, event: GitHubEvent, payload: WebhookPayload) -> None:
        callback = self._callbacks[event]
        try:
            if inspect.iscoroutinefunction(callback):
                await callback(payload)
            else:
                result = await run_in_threadpool(callback, payload)
                if inspect.isawaitable(result):
                    await result
        except Exception as e:
            logger.exception(f"Failed to execute {event.value} callback: {e}")
            raise CallbackError(f"{event.value} callback failed") from e

        logger.info(f"Handled {event.value} event")
