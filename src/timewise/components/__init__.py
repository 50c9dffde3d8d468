"""Reusable PyQt6 components."""

from .toast_host import ToastHost, ToastItem  # noqa: F401
