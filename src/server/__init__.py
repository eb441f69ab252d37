"""Micropub Endpoint Package.

Flask application exposing the Micropub endpoint, plus the Gunicorn entry
point that serves it.

Endpoints:
    POST /micropub: Create a post from an mf2 JSON or form-encoded request
    GET /health: Health check endpoint for monitoring

Usage:
    Start the server:
        $ micropub-server

    Test with curl:
        $ curl -X POST http://localhost:5000/micropub \
               -H "Authorization: Bearer $TOKEN" \
               -H "Content-Type: application/json" \
               -d '{"type": ["h-entry"], "properties": {"content": ["hello"]}}'
"""
from .server import create_app

__all__ = ["create_app"]
