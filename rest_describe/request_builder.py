"""Turns a call intent into a concrete wire request."""

import logging
from typing import Any, Dict, Optional

from jsonschema.exceptions import SchemaError

from .config import Configuration
from .errors import ValidationFailed
from .models import JSON_MIME_TYPE, CallIntent, HTTPMethod, WireRequest
from .validation import SchemaValidator


class RequestBuilder:
    """Builds wire requests from the configuration and a call intent

    Args:
        config: Shared configuration (base URL, user agent, access token)
        validator: Schema validator used for JSON payloads
    """

    def __init__(self, config: Configuration, validator: Optional[SchemaValidator] = None):
        self.config = config
        self.validator = validator or SchemaValidator()

    def build_headers(self, overrides: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        overrides = {key.lower(): value for key, value in (overrides or {}).items()}
        headers = dict(overrides)
        headers["user-agent"] = self.config.get_user_agent()
        headers["accept"] = overrides.get("accept") or JSON_MIME_TYPE
        headers["content-type"] = overrides.get("content-type") or JSON_MIME_TYPE
        return headers

    def sends_json(self, intent: CallIntent) -> bool:
        if intent.method == HTTPMethod.GET:
            return False
        return self.build_headers(intent.headers)["content-type"] == JSON_MIME_TYPE

    def validate_intent(self, intent: CallIntent) -> None:
        """Check a JSON payload against the intent schema, if any

        GET and form-encoded payloads are never validated.

        Raises:
            ValidationFailed: If the payload violates the schema or the schema is malformed
        """
        if not intent.schema or not self.sends_json(intent):
            return
        try:
            violations = self.validator.validate(intent.schema, dict(intent.payload or {}))
        except SchemaError as e:
            logging.error(f"[RequestBuilder] Invalid schema for {intent.method.value} {intent.path}: {e.message}")
            raise ValidationFailed([f"Invalid schema: {e.message}"]) from e
        if violations:
            raise ValidationFailed(
                [str(violation) for violation in violations],
                self.validator.generate_error_message(violations),
            )

    def build(self, intent: CallIntent) -> WireRequest:
        """Build the wire request for one call

        GET payloads become the query string. Other methods send the payload
        as a JSON body, validated against the schema first, or as a form body
        when the content type is not JSON. The access token is added to the
        query string of every call except those to the token endpoint.

        Raises:
            ValidationFailed: If a schema is given and the JSON payload violates it
        """
        headers = self.build_headers(intent.headers)
        payload: Dict[str, Any] = dict(intent.payload or {})
        query: Dict[str, Any] = {}
        json_body = None
        form_body = None

        if intent.method == HTTPMethod.GET:
            query = payload
        elif headers["content-type"] == JSON_MIME_TYPE:
            self.validate_intent(intent)
            json_body = payload
        else:
            form_body = payload

        # token endpoint calls authenticate with the grant payload only
        access_token = self.config.get_access_token()
        if access_token and intent.path != self.config.get_token_path():
            query["access_token"] = access_token

        request = WireRequest(
            uri=self.config.get_base_url() + intent.path,
            method=intent.method,
            headers=headers,
            query=query,
            json=json_body,
            form=form_body,
        )
        logging.debug(f"[RequestBuilder] Built {request.method.value} {request.uri}")
        return request


__all__ = [
    "RequestBuilder",
]
