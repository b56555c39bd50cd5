from .api import NO_API_KEY_MESSAGE, BrevoClient, RawResponse, UpstreamRequest
from .normalize import Err, Ok, Outcome, normalize

__all__ = [
    "NO_API_KEY_MESSAGE",
    "BrevoClient",
    "Err",
    "Ok",
    "Outcome",
    "RawResponse",
    "UpstreamRequest",
    "normalize",
]
