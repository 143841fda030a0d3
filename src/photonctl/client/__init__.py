"""Client entrypoints."""

from photonctl.client.async_client import AsyncPhotonClient, connect

__all__ = ["AsyncPhotonClient", "connect"]
