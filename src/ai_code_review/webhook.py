"""
Webhook Entry Point

Handles GitHub pull_request webhook deliveries, either through the
Flask app (create_app) or as a serverless function (lambda_handler).

Every delivery gets a JSON response:
- 200 "Unsupported event type"
- 200 "No diff found"
- 200 "Review completed successfully"
- 500 "Error processing webhook" with the error text
"""

import json
import base64
import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from flask import Flask, request, jsonify

from .api import ReviewOrchestrator
from .config import AppConfig, setup_logging
from .github.client import GitHubClient
from .llm.generator import ReviewGenerator
from .models.events import UnsupportedEventError, parse_trigger
from .models.pull_request import PullRequestDetails
from .models.review import ReviewStatus


logger = logging.getLogger(__name__)

RESPONSE_MESSAGES = {
    ReviewStatus.UNSUPPORTED: "Unsupported event type",
    ReviewStatus.NO_DIFF: "No diff found",
    ReviewStatus.NO_REVIEW: "Review completed successfully",
    ReviewStatus.COMPLETED: "Review completed successfully",
}


def _response(status: ReviewStatus) -> Tuple[int, Dict[str, Any]]:
    return 200, {"message": RESPONSE_MESSAGES[status], "status": status.value}


def handle_webhook(
    payload: Mapping[str, Any],
    config: Optional[AppConfig] = None,
    event_name: Optional[str] = None,
    github_client: Optional[GitHubClient] = None,
    generator: Optional[ReviewGenerator] = None
) -> Tuple[int, Dict[str, Any]]:
    """
    Process one webhook delivery.

    Args:
        payload: Decoded webhook body
        config: Configuration (default: AppConfig.from_env())
        event_name: X-GitHub-Event header value, when known
        github_client: Optional preconfigured GitHub client
        generator: Optional preconfigured review generator

    Returns:
        Tuple of (HTTP status code, JSON body)
    """
    try:
        if event_name and event_name != "pull_request":
            logger.info(f"Unsupported event: {event_name}")
            return _response(ReviewStatus.UNSUPPORTED)

        try:
            trigger = parse_trigger(payload)
        except UnsupportedEventError as e:
            logger.info(str(e))
            return _response(ReviewStatus.UNSUPPORTED)

        config = config or AppConfig.from_env()
        config.validate()

        repository = payload["repository"]
        pr = PullRequestDetails.from_api(
            repository["owner"]["login"],
            repository["name"],
            payload["pull_request"],
        )

        orchestrator = ReviewOrchestrator.from_config(config, github_client, generator)
        result = orchestrator.review(trigger, pr)
        return _response(result.status)

    except Exception as e:
        logger.error(f"Error processing webhook: {e}")
        return 500, {"message": "Error processing webhook", "error": str(e)}


def _header(headers: Optional[Mapping[str, str]], name: str) -> Optional[str]:
    if not headers:
        return None
    for key, value in headers.items():
        if key.lower() == name.lower():
            return value
    return None


def lambda_handler(event: Mapping[str, Any], context: Any = None) -> Dict[str, Any]:
    """API Gateway proxy handler."""
    config = AppConfig.from_env()
    setup_logging(config.logging)

    try:
        body = event.get("body") or "{}"
        if event.get("isBase64Encoded"):
            body = base64.b64decode(body).decode("utf-8")
        payload = json.loads(body)
    except ValueError as e:
        logger.error(f"Error processing webhook: {e}")
        status_code, response_body = 500, {"message": "Error processing webhook", "error": str(e)}
    else:
        status_code, response_body = handle_webhook(
            payload,
            config=config,
            event_name=_header(event.get("headers"), "X-GitHub-Event"),
        )

    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(response_body, ensure_ascii=False),
    }


def create_app(
    config: Optional[AppConfig] = None,
    github_client: Optional[GitHubClient] = None,
    generator: Optional[ReviewGenerator] = None
) -> Flask:
    """Create the Flask app serving the webhook endpoint."""
    config = config or AppConfig.from_env()
    setup_logging(config.logging)

    app = Flask(__name__)

    @app.route('/api/v1/health', methods=['GET'])
    def health_check():
        """Health check endpoint."""
        return jsonify({
            'status': 'healthy',
            'service': 'ai-code-review',
            'model': config.llm.model,
        })

    @app.route('/api/v1/webhook', methods=['POST'])
    def webhook():
        """GitHub webhook endpoint."""
        payload = request.get_json(silent=True) or {}
        status_code, body = handle_webhook(
            payload,
            config=config,
            event_name=request.headers.get('X-GitHub-Event'),
            github_client=github_client,
            generator=generator,
        )
        return jsonify(body), status_code

    return app
