from typing import Optional

import httpx
from fastapi import Depends

from config import Settings, get_settings
from relay import RelayHandler


def get_upstream_transport() -> Optional[httpx.AsyncBaseTransport]:
    """Default httpx transport. Tests override this with an httpx.MockTransport."""
    return None


def get_relay_handler(
    settings: Settings = Depends(get_settings),
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_upstream_transport),
) -> RelayHandler:
    return RelayHandler(settings, transport=transport)
