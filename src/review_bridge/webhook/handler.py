"""GitHub webhook handler."""

import json
import logging
from collections.abc import Callable

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from review_bridge.config import Settings, get_settings
from review_bridge.github import GitHubAPIError, GitHubApp, GitHubClient
from review_bridge.webhook.models import (
    CommentEvent,
    DispatchPayload,
    WebhookRequest,
    WebhookResponse,
)
from review_bridge.webhook.validator import validate_github_signature

logger = logging.getLogger(__name__)
router = APIRouter()

SIGNATURE_HEADER = "x-hub-signature-256"
EVENT_HEADER = "x-github-event"
DELIVERY_HEADER = "x-github-delivery"

REQUIRED_PERMISSIONS = frozenset({"admin", "maintain", "write"})


class WebhookHandler:
    """
    Turns an ``issue_comment`` delivery into a review dispatch.

    Every expected outcome is returned as a WebhookResponse. The gates run in
    order and the first one that fails decides the response:

    1. Webhook secret configured
    2. Signature valid
    3. Body is a JSON object
    4. Event is issue_comment/created
    5. Comment is on a pull request
    6. Comment starts with the trigger phrase
    7. Author is not a bot
    8. App credentials configured
    9. Installation client obtained
    10. Commenter has write access or better
    11. PR head sha fetched, reaction added, dispatch sent
    """

    def __init__(self, settings: Settings, app_factory: Callable[..., GitHubApp] = GitHubApp):
        self.settings = settings
        self._app_factory = app_factory

    async def handle(self, request: WebhookRequest) -> WebhookResponse:
        secret = self.settings.github_webhook_secret.strip()
        if not secret:
            logger.error("GITHUB_WEBHOOK_SECRET is not configured")
            return WebhookResponse(500, "missing secret")

        if not validate_github_signature(request.body, request.header(SIGNATURE_HEADER), secret):
            return WebhookResponse(401, "bad signature")

        delivery_id = request.header(DELIVERY_HEADER)

        try:
            payload = json.loads(request.body)
        except ValueError as e:
            logger.warning(f"Delivery {delivery_id}: body is not valid JSON: {e}")
            return WebhookResponse(400, "bad payload")
        if not isinstance(payload, dict):
            logger.warning(f"Delivery {delivery_id}: body is not a JSON object")
            return WebhookResponse(400, "bad payload")

        event_type = request.header(EVENT_HEADER)
        action = payload.get("action")
        if event_type != "issue_comment" or action != "created":
            logger.debug(f"Ignoring event: type={event_type}, action={action}")
            return WebhookResponse(200, "ignored")

        event = CommentEvent.from_payload(payload)

        if not event.is_pull_request:
            return WebhookResponse(200, "ignored (not PR)")

        if not event.has_command(self.settings.trigger_phrase):
            return WebhookResponse(200, "ignored (no cmd)")

        if event.author_type == "Bot":
            logger.info(f"Ignoring command from bot {event.author_login}")
            return WebhookResponse(200, "ignored (bot)")

        app_id = self.settings.app_id.strip()
        private_key = self.settings.resolve_private_key()
        if not app_id or not private_key:
            logger.error(
                f"Missing app credentials: app_id={bool(app_id)}, private_key={bool(private_key)}"
            )
            return WebhookResponse(500, "missing app creds")

        if (
            event.installation_id is None
            or event.issue_number is None
            or event.comment_id is None
            or not event.owner
            or not event.repo
            or not event.author_login
        ):
            logger.warning(f"Delivery {delivery_id}: command payload is missing required fields")
            return WebhookResponse(400, "bad payload")

        app = self._app_factory(app_id, private_key, api_url=self.settings.github_api_url)
        try:
            client = await app.get_installation_client(event.installation_id)
        except GitHubAPIError as e:
            logger.error(
                f"Delivery {delivery_id}: could not obtain client for installation "
                f"{event.installation_id}: {e}"
            )
            return WebhookResponse(502, "upstream error")

        async with client:
            try:
                return await self._authorize_and_dispatch(client, event, delivery_id)
            except GitHubAPIError as e:
                logger.error(
                    f"Delivery {delivery_id}: GitHub API error for {event.repo_full_name}: {e}"
                )
                return WebhookResponse(502, "upstream error")

    async def _authorize_and_dispatch(
        self, client: GitHubClient, event: CommentEvent, delivery_id: str | None
    ) -> WebhookResponse:
        owner, repo = event.owner, event.repo

        permission = await client.get_collaborator_permission(owner, repo, event.author_login)
        if permission not in REQUIRED_PERMISSIONS:
            logger.info(
                f"Ignoring command from {event.author_login} on {event.repo_full_name}: "
                f"permission={permission}"
            )
            return WebhookResponse(200, "ignored (insufficient perms)")

        # The current head, not the one at comment time, is what gets reviewed
        pr = await client.get_pull_request(owner, repo, event.issue_number)
        head_sha = (pr.get("head") or {}).get("sha") or "unknown"

        await client.create_comment_reaction(
            owner, repo, event.comment_id, self.settings.reaction_content
        )

        dispatch = DispatchPayload(
            owner=owner,
            repo=repo,
            pr_number=event.issue_number,
            head_sha=head_sha,
            requested_by=event.author_login,
        )

        dispatch_status = "success"
        try:
            await client.create_repository_dispatch(
                owner, repo, self.settings.dispatch_event_type, dispatch.to_dict()
            )
        except GitHubAPIError as e:
            # Retrying the delivery would repeat the reaction, so report success anyway
            dispatch_status = "failure"
            logger.error(f"Dispatch error: {e}")

        logger.info(
            json.dumps(
                {
                    "delivery_id": delivery_id,
                    "repo": event.repo_full_name,
                    "pr_number": event.issue_number,
                    "head_sha": head_sha,
                    "dispatch_status": dispatch_status,
                }
            )
        )

        return WebhookResponse(200, "ok")


def get_webhook_handler(settings: Settings = Depends(get_settings)) -> WebhookHandler:
    return WebhookHandler(settings)


@router.post("/github/webhook")
async def github_webhook(
    request: Request,
    handler: WebhookHandler = Depends(get_webhook_handler),
) -> PlainTextResponse:
    """
    Handle incoming GitHub webhooks.

    The raw body is passed through untouched so the signature can be checked.
    """
    body = await request.body()
    delivery_id = request.headers.get(DELIVERY_HEADER)
    event_type = request.headers.get(EVENT_HEADER)
    logger.info(f"Received GitHub webhook: event={event_type}, delivery={delivery_id}")

    result = await handler.handle(WebhookRequest.from_raw(request.headers, body))
    return PlainTextResponse(result.body, status_code=result.status_code)
