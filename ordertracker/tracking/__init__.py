from ordertracker.tracking.progress import (
    DEFAULT_PROGRESS,
    STATUS_PROGRESS,
    build_polyline,
    build_route,
    estimate_delivery,
    get_tracking,
    interpolate,
    order_detail,
    order_summary,
    progress_for,
    tracking_for_order,
)

__all__ = [
    "DEFAULT_PROGRESS",
    "STATUS_PROGRESS",
    "build_polyline",
    "build_route",
    "estimate_delivery",
    "get_tracking",
    "interpolate",
    "order_detail",
    "order_summary",
    "progress_for",
    "tracking_for_order",
]
