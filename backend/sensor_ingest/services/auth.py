"""
API Key Check
=============

Devices prove who they are with ONE shared secret, sent in the header:

    x-api-key: <SENSOR_API_KEY>

Two ways to fail:
    - The server has no SENSOR_API_KEY at all -> ConfigurationError (500).
      That's our fault, not the device's, so every POST fails until it's set.
    - The header is missing or different      -> AuthenticationError (401)
"""

import logging
from typing import Optional

from sensor_ingest.errors import AuthenticationError, ConfigurationError

logger = logging.getLogger(__name__)


API_KEY_HEADER = "x-api-key"


def check_api_key(expected: Optional[str], provided: Optional[str]) -> None:
    """
    Verify the caller's API key against the server's secret.

    Args:
        expected: The configured SENSOR_API_KEY (None or "" if not set)
        provided: Value of the x-api-key header (None if absent)

    Raises:
        ConfigurationError: If the server has no secret configured
        AuthenticationError: If the key is missing or wrong
    """
    if not expected:
        logger.error("SENSOR_API_KEY is not set on the server")
        raise ConfigurationError()

    if provided != expected:
        raise AuthenticationError()
