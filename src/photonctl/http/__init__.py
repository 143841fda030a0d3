from photonctl.http.retry import RetryPolicy
from photonctl.http.transport import PhotonTransport

__all__ = ["PhotonTransport", "RetryPolicy"]
