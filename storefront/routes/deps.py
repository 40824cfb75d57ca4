"""Request dependencies shared by the storefront routes"""

from typing import Optional

from fastapi import Header, Response

from ..controllers import PageController, PageState
from ..core.session import DeviceSession, session_manager

DEVICE_ID_HEADER = "X-Device-Id"


def get_device_session(
    response: Response,
    x_device_id: Optional[str] = Header(None),
) -> DeviceSession:
    """Resolve the device from its header, creating one when absent"""
    session = session_manager.get_or_create_session(x_device_id)
    response.headers[DEVICE_ID_HEADER] = session.device_id
    return session


async def ensure_loaded(page: PageController) -> PageController:
    """Load a page the first time an action needs its state"""
    if page.state != PageState.LOADED:
        await page.load()
    return page


def render(page: PageController, response: Response, **extra) -> dict:
    """Page snapshot; a page stuck in its error state answers 502"""
    if page.state == PageState.ERROR:
        response.status_code = 502
    data = page.snapshot()
    data.update(extra)
    return data
