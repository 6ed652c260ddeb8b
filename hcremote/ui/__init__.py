"""Tkinter views for the HC Remote window."""

from .views import CommandView, DeviceListView, DriveView, ReceivedView

__all__ = ["CommandView", "DeviceListView", "DriveView", "ReceivedView"]
