"""
LiveFeed — subscription-based stream of full data snapshots.

Usage::

    feed = LiveFeed(store.all_users, release_after=5.0)

    sub = feed.subscribe(table.show)   # show() receives the current list now
    store.insert(record)               # ... and again after every refresh()
    sub.cancel()                       # last subscriber gone → release timer

Semantics
─────────
• subscribe() always delivers the complete current snapshot immediately.
• refresh() reloads the snapshot and pushes it to every subscriber,
  synchronously, on the calling thread.
• When the last subscriber leaves, the cached snapshot is dropped after
  *release_after* seconds.  A later subscribe() reloads it from the source;
  there is no catch-up of changes made while released.
"""

import logging
import threading
from typing import Callable, Generic, Optional, TypeVar

__all__ = ["LiveFeed", "Subscription"]

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Subscription(Generic[T]):
    """Handle returned by LiveFeed.subscribe(); cancel() to stop receiving."""

    def __init__(self, feed: "LiveFeed[T]", callback: Callable[[T], None]) -> None:
        self._feed     = feed
        self._callback = callback
        self._active   = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        """Detach from the feed.  Safe to call more than once."""
        if not self._active:
            return
        self._active = False
        self._feed._unsubscribe(self)

    def _deliver(self, snapshot: T) -> None:
        if not self._active:
            return
        try:
            self._callback(snapshot)
        except Exception:  # noqa: BLE001
            logger.exception("LiveFeed subscriber %r failed", self._callback)

    def __enter__(self) -> "Subscription[T]":
        return self

    def __exit__(self, *exc_info) -> None:
        self.cancel()


class LiveFeed(Generic[T]):
    """
    Observable wrapper around a snapshot-producing *source* callable.

    Attributes
    ──────────
    active            — True while a snapshot is loaded
    subscriber_count  — number of live subscriptions
    snapshot          — last loaded snapshot, or None when released
    """

    def __init__(
        self,
        source: Callable[[], T],
        release_after: Optional[float] = 5.0,
    ) -> None:
        self._source        = source
        self._release_after = release_after
        self._subscribers:   list[Subscription[T]]       = []
        self._snapshot:      Optional[T]                 = None
        self._active:        bool                        = False
        self._release_timer: Optional[threading.Timer]   = None
        self._lock = threading.RLock()

    # ── Properties ────────────────────────────────────────────────────────

    @property
    def active(self) -> bool:
        return self._active

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    @property
    def snapshot(self) -> Optional[T]:
        return self._snapshot

    # ── Public API ────────────────────────────────────────────────────────

    def subscribe(self, callback: Callable[[T], None]) -> Subscription[T]:
        """
        Register *callback* and deliver the current snapshot to it.

        Returns:
            A Subscription; cancel it (or use it as a context manager) to stop.
        """
        with self._lock:
            self._cancel_release()
            if not self._active:
                self._snapshot = self._source()
                self._active = True
                logger.debug("LiveFeed activated (%s)", self._describe())
            sub = Subscription(self, callback)
            self._subscribers.append(sub)
            snapshot = self._snapshot
        sub._deliver(snapshot)
        return sub

    def refresh(self) -> None:
        """
        Reload the snapshot and push it to every subscriber.

        A failing reload is logged; the previous snapshot stays in place and
        subscribers are not notified.
        """
        with self._lock:
            if not self._active:
                return
            try:
                self._snapshot = self._source()
            except Exception:  # noqa: BLE001
                logger.exception("LiveFeed reload failed (%s)", self._describe())
                return
            snapshot = self._snapshot
            subscribers = list(self._subscribers)
        for sub in subscribers:
            sub._deliver(snapshot)

    def close(self) -> None:
        """Drop all subscribers and release immediately."""
        with self._lock:
            for sub in self._subscribers:
                sub._active = False
            self._subscribers.clear()
            self._cancel_release()
            self._release()

    # ── Internal helpers ──────────────────────────────────────────────────

    def _describe(self) -> str:
        return getattr(self._source, "__qualname__", repr(self._source))

    def _unsubscribe(self, sub: Subscription[T]) -> None:
        with self._lock:
            if sub in self._subscribers:
                self._subscribers.remove(sub)
            if not self._subscribers and self._active:
                self._schedule_release()

    def _schedule_release(self) -> None:
        if self._release_after is None:
            return
        if self._release_after <= 0:
            self._release()
            return
        timer = threading.Timer(self._release_after, self._release_if_idle)
        timer.daemon = True
        self._release_timer = timer
        timer.start()

    def _cancel_release(self) -> None:
        if self._release_timer is not None:
            self._release_timer.cancel()
            self._release_timer = None

    def _release_if_idle(self) -> None:
        with self._lock:
            # A newer timer (or none) owns the release now
            if self._release_timer is not threading.current_thread():
                return
            self._release_timer = None
            if not self._subscribers:
                self._release()

    def _release(self) -> None:
        if self._active:
            logger.debug("LiveFeed released (%s)", self._describe())
        self._active = False
        self._snapshot = None
