import logging
import threading
import time
from typing import Any, Callable, Optional


def _spawn_thread(target: Callable[..., Any], *args: Any) -> None:
    # Default spawner for standalone use; the app injects socketio.start_background_task
    threading.Thread(target=target, args=args, daemon=True).start()


class TurnClock:
    """Per-turn countdown that hands control back to its owner on expiry.

    - ``start`` cancels whatever countdown is live and starts a fresh one
    - every tick runs under ``lock`` (the owning session's lock)
    - a countdown task exits as soon as its generation is stale, so at most one
      task ever ticks and expiry fires once per ``start``
    """

    def __init__(
        self,
        on_tick: Callable[[int], None],
        on_expire: Callable[[], None],
        lock: Optional[threading.RLock] = None,
        spawn: Optional[Callable[..., Any]] = None,
        sleep: Callable[[float], Any] = time.sleep,
        interval: float = 1.0,
        logger: Optional[logging.Logger] = None,
    ):
        self._on_tick = on_tick
        self._on_expire = on_expire
        self._lock = lock or threading.RLock()
        self._spawn = spawn or _spawn_thread
        self._sleep = sleep
        self._interval = interval
        self._logger = logger or logging.getLogger(__name__)
        self._generation = 0
        self.remaining = 0
        self.running = False

    def start(self, duration: int) -> None:
        with self._lock:
            self._generation += 1
            generation = self._generation
            self.remaining = duration
            self.running = True
            self._logger.info(f"[clock-start] generation={generation} duration={duration}s")
            self._on_tick(self.remaining)
        self._spawn(self._countdown, generation)

    def stop(self) -> None:
        with self._lock:
            if self.running:
                self._logger.info(f"[clock-stop] generation={self._generation} remaining={self.remaining}s")
            self._generation += 1
            self.running = False

    def set_remaining(self, seconds: int) -> None:
        """Set the displayed value without starting a countdown (used on reset)."""
        with self._lock:
            self.remaining = seconds

    def tick(self, generation: Optional[int] = None) -> bool:
        """Advance one second. Returns False once this countdown is over.

        ``generation`` defaults to the live one, which lets tests drive the clock
        by hand.
        """
        with self._lock:
            if generation is None:
                generation = self._generation
            if not self.running or generation != self._generation:
                return False

            self.remaining -= 1
            self._on_tick(self.remaining)
            if self.remaining > 0:
                return True

            self.running = False
            self._generation += 1
            self._logger.info(f"[clock-expire] generation={generation}")
            self._on_expire()
            return False

    def _countdown(self, generation: int) -> None:
        while True:
            self._sleep(self._interval)
            if not self.tick(generation):
                return
