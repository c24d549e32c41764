"""Webhook handling for GitHub events."""

from build_hook.webhook.dispatcher import GitHubWebhook
from build_hook.webhook.handler import router
from build_hook.webhook.validator import compute_signature, validate_github_signature

__all__ = ["GitHubWebhook", "router", "compute_signature", "validate_github_signature"]
