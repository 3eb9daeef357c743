"""Boundary translation of domain errors into CLI failures."""

from __future__ import annotations

import click

from ims.domain.exceptions import DomainException, to_error_response


def fail(exc: DomainException) -> click.ClickException:
    """Build the ClickException to raise for a domain error."""
    payload = to_error_response(exc)
    message = f"[{payload['kind']}] {payload['message']} (code {payload['error_code']})"
    if payload["retryable"]:
        message += " (retryable)"
    return click.ClickException(message)
