"""
Qt integration built on PySide6 (optional dependency).
"""

from .worker import DeletionWorker, WorkerSignals

__all__ = ["DeletionWorker", "WorkerSignals"]
