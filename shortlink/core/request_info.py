"""
Request Metadata Extraction

Helpers shared by the logging middleware and the API layer for pulling
client details out of an incoming request.
"""

from typing import Optional

from starlette.requests import Request


def get_client_ip(request: Request) -> Optional[str]:
    """
    Extract client IP address from request.

    Handles proxies and load balancers by checking X-Forwarded-For header.

    Args:
        request: Incoming request

    Returns:
        IP address as string, or None when the request has no socket peer
        (visits without an address are not counted as unique visitors)
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # X-Forwarded-For can contain multiple IPs, take the first one
        client_ip = forwarded_for.split(",")[0].strip()
        if client_ip:
            return client_ip

    return request.client.host if request.client else None
