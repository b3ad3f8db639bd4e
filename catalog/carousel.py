"""Image carousel state machine for the open detail panel."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from models.constants import CAROUSEL_AUTOPLAY_INTERVAL

from .scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CarouselState:
    """Snapshot of the carousel for a renderer to reflect."""

    index: int
    length: int
    autoplaying: bool
    show_navigation: bool
    current_image: Optional[str]


class CarouselController:
    """
    Cycles through the images of the currently open detail panel.

    Autoplay advances one image per interval. Manual navigation cancels the
    pending tick and schedules a fresh one, so a manual step is never
    followed by an early autoplay step. Every scheduled tick is stamped with
    a generation number; ticks from an older generation are dropped, which
    keeps a stale timer from one panel away from the next panel's index.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        interval: float = CAROUSEL_AUTOPLAY_INTERVAL,
        on_change: Optional[Callable[[CarouselState], None]] = None,
    ):
        """
        Initialize the carousel.

        Args:
            scheduler: Provides the cancelable autoplay timer
            interval: Autoplay period in seconds
            on_change: Called with the new state after every index change
        """
        self.scheduler = scheduler
        self.interval = interval
        self.on_change = on_change

        self._images: Tuple[str, ...] = ()
        self._index = 0
        self._autoplay = False
        self._timer: Optional[TimerHandle] = None
        self._generation = 0

    @property
    def index(self) -> int:
        return self._index

    @property
    def images(self) -> Tuple[str, ...]:
        return self._images

    @property
    def is_open(self) -> bool:
        return bool(self._images)

    @property
    def state(self) -> CarouselState:
        return CarouselState(
            index=self._index,
            length=len(self._images),
            autoplaying=self._autoplay and self._timer is not None,
            show_navigation=len(self._images) > 1,
            current_image=self._images[self._index] if self._images else None,
        )

    def open(self, images: Sequence[str], autoplay: bool = True) -> CarouselState:
        """
        Re-seed the carousel with a new image sequence.

        Resets the index to 0 and cancels any timer left over from the
        previous sequence. Autoplay only starts for more than one image; an
        empty sequence closes the carousel.
        """
        self._cancel_timer()
        self._images = tuple(images)
        self._index = 0
        self._autoplay = autoplay and len(self._images) > 1
        if self._autoplay:
            self._schedule()
        self._notify()
        return self.state

    def close(self) -> None:
        """Drop the image sequence and cancel the autoplay timer."""
        self._cancel_timer()
        self._images = ()
        self._index = 0
        self._autoplay = False

    def next(self) -> int:
        if not self._images:
            return self._index
        self._index = (self._index + 1) % len(self._images)
        self._restart_timer()
        self._notify()
        return self._index

    def prev(self) -> int:
        if not self._images:
            return self._index
        length = len(self._images)
        self._index = (self._index - 1 + length) % length
        self._restart_timer()
        self._notify()
        return self._index

    def go_to(self, index: int) -> bool:
        """
        Jump to an image.

        Returns:
            False (and changes nothing) when index is outside [0, length)
        """
        valid = isinstance(index, int) and not isinstance(index, bool)
        if not valid or not 0 <= index < len(self._images):
            logger.debug(f"Ignoring carousel index {index!r} (length {len(self._images)})")
            return False
        self._index = index
        self._restart_timer()
        self._notify()
        return True

    def set_autoplay(self, enabled: bool) -> None:
        """Pause or resume autoplay; single-image sequences stay paused."""
        enabled = enabled and len(self._images) > 1
        if enabled == self._autoplay:
            return
        self._autoplay = enabled
        if enabled:
            self._schedule()
        else:
            self._cancel_timer()

    def _restart_timer(self) -> None:
        if self._autoplay:
            self._cancel_timer()
            self._schedule()

    def _schedule(self) -> None:
        self._generation += 1
        generation = self._generation
        self._timer = self.scheduler.call_later(
            self.interval, lambda: self._tick(generation)
        )

    def _cancel_timer(self) -> None:
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _tick(self, generation: int) -> None:
        if generation != self._generation or not self._autoplay or not self._images:
            logger.debug(f"Dropping stale carousel tick (generation {generation})")
            return
        self._index = (self._index + 1) % len(self._images)
        self._schedule()
        self._notify()

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self.state)
