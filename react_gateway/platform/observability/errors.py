"""Bugsnag error reporting integration.

ERROR-level log records (including every fatal completion failure and every
failed streaming task) are forwarded to Bugsnag.
"""

import logging

import bugsnag
from bugsnag.handlers import BugsnagHandler

from react_gateway.platform.constants import SERVICE_NAME


def initialize_bugsnag(api_key: str, release_stage: str) -> BugsnagHandler | None:
    """Initialize Bugsnag error reporting.

    Args:
        api_key: Bugsnag project API key
        release_stage: Environment identifier ("production", "development" or "local")

    Returns:
        The handler attached to the root logger, or None when reporting is disabled

    Note:
        No-op when release_stage is "local" to avoid reporting during local development.
    """
    if release_stage == "local":
        return None
    bugsnag.configure(
        api_key=api_key,
        release_stage=release_stage,
        app_type=SERVICE_NAME,
        auto_notify=True,
    )
    handler = BugsnagHandler()
    handler.setLevel(logging.ERROR)
    logging.getLogger().addHandler(handler)
    return handler
