from ordertracker.notifications.service import notify_subscribers, send_confirmation

__all__ = ["notify_subscribers", "send_confirmation"]
