"""GitHub webhook handler."""

import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from starlette.requests import ClientDisconnect

from build_hook.webhook.dispatcher import GitHubWebhook
from build_hook.webhook.errors import MissingSignatureError, UnreadableBodyError, WebhookError
from build_hook.webhook.models import GitHubEvent

logger = logging.getLogger(__name__)
router = APIRouter()


def get_webhook(request: Request) -> GitHubWebhook:
    """Return the webhook instance built at application startup."""
    return request.app.state.webhook


async def _read_body(request: Request) -> bytes:
    try:
        return await request.body()
    except ClientDisconnect as e:
        logger.warning("Failed to read request body")
        raise UnreadableBodyError("failed to read body") from e


@router.post("/github")
async def github_webhook(
    request: Request,
    webhook: GitHubWebhook = Depends(get_webhook),
    x_hub_signature: str | None = Header(None),
    x_github_event: str | None = Header(None),
) -> dict[str, str]:
    """
    Handle incoming GitHub webhooks.

    The raw body is verified before anything is decoded, then routed by
    the X-GitHub-Event header to the matching callback.
    """
    event = GitHubEvent.from_header(x_github_event)

    try:
        # Missing signature is rejected before the body is read
        if not x_hub_signature:
            logger.warning("Signature is missing")
            raise MissingSignatureError("signature is missing")

        body = await _read_body(request)
        webhook.verify(body, x_hub_signature)
        await webhook.dispatch(event, body)
    except WebhookError as e:
        logger.info(f"Rejecting {x_github_event} delivery with status {e.status_code}")
        raise HTTPException(status_code=e.status_code, detail=e.detail) from e

    if event is GitHubEvent.PING:
        return {"status": "pong"}
    return {"status": "ok", "event": event.value}
