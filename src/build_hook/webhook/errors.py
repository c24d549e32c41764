"""Webhook request failures and the HTTP status each one maps to."""


class WebhookError(Exception):
    """Base class for failures that terminate a webhook request."""

    status_code = 400
    detail = "bad request"


class MissingSignatureError(WebhookError):
    """The X-Hub-Signature header is absent or empty."""


class InvalidSignatureError(WebhookError):
    """The signature is malformed or does not match the body."""


class UnreadableBodyError(WebhookError):
    """The request body could not be read."""


class UnknownEventError(WebhookError):
    """The X-GitHub-Event label is not one we handle."""


class PayloadDecodeError(WebhookError):
    """The body does not match the shape expected for its event."""


class CallbackError(WebhookError):
    """A registered callback raised while handling the event."""

    status_code = 500
    detail = "internal server error"
