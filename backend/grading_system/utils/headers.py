"""Alert headers attached to entity responses.

Frontends read `X-<app>-alert` to show a notification and
`X-<app>-params` to interpolate it. Failures use `X-<app>-error`
carrying an `error.<key>` message key instead.
"""

from typing import Dict

from ..config import settings


def alert_headers(message: str, param: str) -> Dict[str, str]:
    app_name = settings.APP_NAME
    return {
        f"X-{app_name}-alert": message,
        f"X-{app_name}-params": param,
    }


def entity_creation_alert(entity_name: str, param: str) -> Dict[str, str]:
    return alert_headers(f"A new {entity_name} is created with identifier {param}", param)


def entity_update_alert(entity_name: str, param: str) -> Dict[str, str]:
    return alert_headers(f"A {entity_name} is updated with identifier {param}", param)


def entity_deletion_alert(entity_name: str, param: str) -> Dict[str, str]:
    return alert_headers(f"A {entity_name} is deleted with identifier {param}", param)


def failure_alert(entity_name: str, error_key: str) -> Dict[str, str]:
    app_name = settings.APP_NAME
    return {
        f"X-{app_name}-error": f"error.{error_key}",
        f"X-{app_name}-params": entity_name,
    }
