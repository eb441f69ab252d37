"""
Micropub Endpoint - Flask Application.

This module implements the HTTP side of a Micropub endpoint. Clients POST a
microformats2 JSON document (or the equivalent form-encoded request); the
endpoint checks the bearer token, classifies and renders the post, and hands
it to a ContentStore.

Architecture:
    1. Verify the bearer token (Authorization header or access_token field)
    2. Parse the body into a MicroformatDocument (JSON schema validated)
    3. Classify the post type and select the page template
    4. Render the body, wrapped in the microformat root when configured
    5. Create the page through the ContentStore
    6. Return 201 Created with the page URL in the Location header

Logging Strategy:
    - INFO: Created posts (type, template, URL)
    - INFO (verbose_logging only): Request payloads and rendered bodies
    - DEBUG: Classification and rendering details
    - ERROR: Validation failures, store failures, exceptions

Error Handling:
    Errors use the Micropub error response format:
    - 400 invalid_request: malformed body, unsupported action
    - 401 unauthorized: no access token
    - 403 forbidden: token rejected
    - 500 server_error: store failure or unexpected exception
    - 503 temporarily_unavailable: token endpoint unreachable

Example Request:
    POST /micropub HTTP/1.1
    Authorization: Bearer xxxx
    Content-Type: application/json

    {"type": ["h-entry"], "properties": {"content": ["hello world"]}}

Functions:
    create_app(store, config, token_verifier): Flask application factory
"""
import json
import logging
from typing import Any, Dict, Optional, Tuple

from flask import Flask, request, jsonify, current_app
from flask_cors import CORS

from config import load_config
from indieauth import TokenVerificationError, TokenVerifier, verifier_from_config
from micropub import (
    MicroformatDocument,
    MicropubConfig,
    ValidationError,
    process_document,
)
from store import ContentStore, ContentStoreError

# Logging is configured in server.main.main() - this module uses the configured logger
logger = logging.getLogger(__name__)


def micropub_error(error: str, description: str, status: int):
    """Build a Micropub error response."""
    return jsonify({"error": error, "error_description": description}), status


def extract_token() -> Tuple[Optional[str], bool]:
    """Return the request's access token and whether it was sent twice.

    Micropub allows the token in the Authorization header or as an
    access_token form field, but not both.
    """
    header_token = None
    scheme, _, credentials = request.headers.get("Authorization", "").strip().partition(" ")
    # Auth schemes are case-insensitive
    if scheme.lower() == "bearer":
        header_token = credentials.strip() or None

    form_token = None
    if not request.is_json:
        form_token = request.form.get("access_token") or None

    if header_token and form_token:
        return None, True
    return header_token or form_token, False


def parse_document(payload: Optional[Dict[str, Any]]) -> MicroformatDocument:
    """Turn the current request body into a MicroformatDocument.

    Raises:
        ValidationError: If the body is not a usable create request
    """
    if request.is_json:
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")
        if payload.get("action"):
            raise ValidationError(f"Unsupported action: {payload.get('action')}")
        return MicroformatDocument.from_json(payload)

    if request.form:
        if request.form.get("action"):
            raise ValidationError(f"Unsupported action: {request.form.get('action')}")
        return MicroformatDocument.from_form(request.form)

    raise ValidationError("Request must be JSON or form-encoded")


def create_app(store: ContentStore, config: Optional[Dict[str, Any]] = None,
               token_verifier: Optional[TokenVerifier] = None) -> Flask:
    """Factory function to create and configure the Flask application.

    Args:
        store: ContentStore that creates pages for processed posts
        config: Optional configuration dictionary (if None, will be loaded from config.yml)
        token_verifier: Optional token verifier (if None, built from config;
            when nothing is configured, requests are not authenticated)

    Returns:
        Configured Flask application with the Micropub and health endpoints

    Example:
        >>> app = create_app(SQLiteContentStore("./data/posts", "https://example.com"))
    """
    app = Flask(__name__)

    if config is None:
        config = load_config()

    cors_config = config.get("cors", {})
    if cors_config.get("enabled", False):
        cors_origins = cors_config.get("origins", [])
        if cors_origins:
            CORS(app, origins=cors_origins)
            logger.info(f"CORS enabled for origins: {cors_origins}")
        else:
            logger.warning("CORS enabled but no origins configured")
    else:
        logger.info("CORS is disabled in configuration")

    settings = MicropubConfig.from_config(config)
    if token_verifier is None:
        token_verifier = verifier_from_config(config)
    if token_verifier is None:
        logger.warning("No token verifier configured: Micropub requests are not authenticated")

    app.config["CONTENT_STORE"] = store
    app.config["MICROPUB_SETTINGS"] = settings
    app.config["TOKEN_VERIFIER"] = token_verifier

    @app.route("/micropub", methods=["POST"])
    def micropub_create():
        """Micropub create endpoint.

        Success Response (201):
            Location: https://example.com/hello-world
            {"status": "success", "url": "...", "post_type": "note"}

        Error Response (400):
            {"error": "invalid_request", "error_description": "..."}
        """
        store = current_app.config["CONTENT_STORE"]
        settings = current_app.config["MICROPUB_SETTINGS"]
        verifier = current_app.config["TOKEN_VERIFIER"]

        try:
            token, duplicated = extract_token()
            if duplicated:
                return micropub_error("invalid_request", "Access token sent in both header and body", 400)

            if verifier is not None:
                if not token:
                    logger.warning("Micropub request without access token")
                    return micropub_error("unauthorized", "No access token was provided", 401)
                if not verifier.verify(token):
                    logger.warning("Micropub request with rejected access token")
                    return micropub_error("forbidden", "The access token is not valid for creating posts", 403)

            payload = request.get_json(silent=True) if request.is_json else None
            doc = parse_document(payload)

            if settings.verbose_logging:
                body = dict(payload) if payload is not None else request.form.to_dict(flat=False)
                body.pop("access_token", None)
                logger.info(f"Micropub request: {json.dumps(body)}")

            post = process_document(doc, settings)
            url = store.create_post(post)

            logger.info(f"Created {post.post_type.value} post: template={post.template}, url={url}")
            if settings.verbose_logging:
                logger.info(f"Micropub post body for {url}: {post.body}")

            response = jsonify({
                "status": "success",
                "url": url,
                "post_type": post.post_type.value,
            })
            response.headers["Location"] = url
            return response, 201

        except ValidationError as e:
            logger.error(f"Micropub request validation failed: {e}")
            return micropub_error("invalid_request", str(e), 400)

        except TokenVerificationError as e:
            logger.error(f"Token verification unavailable: {e}")
            return micropub_error("temporarily_unavailable", "Token verification is unavailable", 503)

        except ContentStoreError as e:
            logger.error(f"Failed to store Micropub post: {e}")
            return micropub_error("server_error", "The post could not be stored", 500)

        except Exception as e:
            logger.error(f"Unexpected error processing Micropub request: {e}", exc_info=True)
            return micropub_error("server_error", "Internal server error", 500)

    @app.route("/health", methods=["GET"])
    def health_check():
        """Health check endpoint for monitoring and load balancers.

        Example:
            $ curl http://localhost:5000/health
            {"status": "healthy"}
        """
        return jsonify({"status": "healthy"}), 200

    return app
