"""
Transport adapters for the Parse SDK.

Built-in Transports:
- HttpxTransport: async HTTP via httpx

Adding New Transports:
    Implement `async send(method, url, body, headers) -> TransportResponse`
    and raise TransportError on failure, then bind it:

    registry.bind(Capability.REQUEST, MyTransport())
"""

from .httpx_transport import HttpxTransport

__all__ = [
    "HttpxTransport",
]
