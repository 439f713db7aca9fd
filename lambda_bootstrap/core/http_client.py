import logging

import httpx

from .config import BaseAppConfig

logger = logging.getLogger(__name__)


class HttpClientFactory:
    """
    HTTP Client Factory for the Runtime API connection.
    """

    def __init__(self, config: BaseAppConfig):
        self.config = config

    def create_sync_client(self, **kwargs) -> httpx.Client:
        """
        Create an httpx.Client suitable for long-polling the Runtime API.

        Args:
            **kwargs: Additional arguments for httpx.Client
        """
        # next-invocation blocks until work arrives, so no read timeout by default.
        kwargs.setdefault("timeout", httpx.Timeout(None, connect=10.0))
        # The Runtime API is always local; never route it through a host proxy.
        kwargs.setdefault("trust_env", False)

        logger.debug(f"Creating Runtime API client (timeout={kwargs['timeout']})")
        return httpx.Client(**kwargs)
