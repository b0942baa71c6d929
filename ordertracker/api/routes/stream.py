"""
Live order updates as server-sent events.

Each connection gets its own timer; there is no fan-out and no replay.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import AsyncIterator, Awaitable, Callable

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse

from ordertracker.api.deps import get_order_store
from ordertracker.config import Settings, get_settings
from ordertracker.models.order import StreamSnapshot
from ordertracker.store.base import OrderStore
from ordertracker.tracking.progress import build_route, progress_for

logger = logging.getLogger(__name__)

router = APIRouter()


def snapshot_for(store: OrderStore, order_id: str) -> StreamSnapshot | None:
    order = store.get(order_id)
    if order is None:
        return None
    return StreamSnapshot(
        id=order.id,
        status=order.status,
        progress=progress_for(order.status),
        route=build_route(order),
        ts=datetime.now(timezone.utc),
    )


async def order_snapshots(
    store: OrderStore,
    order_id: str,
    interval: float,
    is_disconnected: Callable[[], Awaitable[bool]],
) -> AsyncIterator[str]:
    """
    Yield one SSE ``data:`` frame immediately, then one per interval.

    Stops when the client disconnects or the order disappears.
    """
    sent = 0
    try:
        while not await is_disconnected():
            snapshot = snapshot_for(store, order_id)
            if snapshot is None:
                break
            yield f"data: {snapshot.model_dump_json(by_alias=True)}\n\n"
            sent += 1
            await asyncio.sleep(interval)
    finally:
        logger.info(
            "Stream closed",
            extra={"json_fields": {"order_id": order_id, "events": sent}},
        )


@router.get("/stream/{order_id}")
async def stream_order(
    order_id: str,
    request: Request,
    store: OrderStore = Depends(get_order_store),
    settings: Settings = Depends(get_settings),
):
    """
    Stream status snapshots for one order.

    Raises:
        HTTPException: 404 if the order is unknown (before the stream opens)
    """
    if store.get(order_id) is None:
        raise HTTPException(status_code=404, detail=f"Order not found: {order_id}")

    return StreamingResponse(
        order_snapshots(
            store,
            order_id,
            interval=settings.stream_interval_seconds,
            is_disconnected=request.is_disconnected,
        ),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
