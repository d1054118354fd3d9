"""Application state machine behind the MeraBuchpan window.

The controller owns the two selected photos, the current AppState and the
result or error that goes with it. The UI only reads these fields and calls
the actions; it never changes state directly.
"""

import logging
import threading
from enum import Enum
from typing import Callable, Optional

from merabuchpan.generation import GeneratedImage, ReunionImageGenerator
from merabuchpan.photos import SelectedPhoto

logger = logging.getLogger(__name__)

MISSING_INPUT_MESSAGE: str = "Please upload both photos before generating."
UNKNOWN_ERROR_MESSAGE: str = "An unknown error occurred. Please try again."


class AppState(Enum):
    """Which view the window shows."""

    INITIAL = "initial"
    LOADING = "loading"
    RESULT = "result"
    ERROR = "error"


class ReunionController:
    """Coordinate photo selection, generation and reset.

    Attributes:
        generator: Client used by the generate action.
        on_change: Optional listener called with the new state after every
            transition.
        child_photo: Selected childhood photo, or None.
        adult_photo: Selected recent photo, or None.
        state: Current AppState.
        generated_image: The result, set only in RESULT.
        error: User-facing message, set only in ERROR.
    """

    def __init__(
        self,
        generator: ReunionImageGenerator,
        on_change: Optional[Callable[[AppState], None]] = None,
    ) -> None:
        self.generator: ReunionImageGenerator = generator
        self.on_change: Optional[Callable[[AppState], None]] = on_change
        self.child_photo: Optional[SelectedPhoto] = None
        self.adult_photo: Optional[SelectedPhoto] = None
        self.state: AppState = AppState.INITIAL
        self.generated_image: Optional[GeneratedImage] = None
        self.error: Optional[str] = None
        # guards the LOADING check and transition against concurrent clicks
        self._generate_lock = threading.Lock()

    @property
    def can_generate(self) -> bool:
        return (
            self.state is AppState.INITIAL
            and self.child_photo is not None
            and self.adult_photo is not None
        )

    def select_child_photo(self, photo: SelectedPhoto) -> None:
        self.child_photo = photo

    def select_adult_photo(self, photo: SelectedPhoto) -> None:
        self.adult_photo = photo

    def generate(self) -> AppState:
        """Run one generation and move to RESULT or ERROR.

        Blocks for the duration of the remote call, so the UI runs it off the
        event thread. Calling it while a generation is in flight does nothing.

        Returns:
            The state after the action.
        """
        with self._generate_lock:
            if self.state is AppState.LOADING:
                logger.warning("Generate requested while a generation is running, ignoring")
                return self.state

            child_photo, adult_photo = self.child_photo, self.adult_photo
            if child_photo is None or adult_photo is None:
                self._transition(AppState.ERROR, error=MISSING_INPUT_MESSAGE)
                return self.state

            self._transition(AppState.LOADING)

        try:
            image = self.generator.generate(child_photo, adult_photo)
        except Exception as e:
            logger.error("Generation failed: %s", e)
            self._transition(AppState.ERROR, error=str(e) or UNKNOWN_ERROR_MESSAGE)
            return self.state

        self._transition(AppState.RESULT, image=image)
        return self.state

    def reset(self) -> None:
        """Clear selections and results and return to INITIAL."""
        self.child_photo = None
        self.adult_photo = None
        self._transition(AppState.INITIAL)

    def _transition(
        self,
        state: AppState,
        image: Optional[GeneratedImage] = None,
        error: Optional[str] = None,
    ) -> None:
        # result and error only ever accompany their own state
        self.state = state
        self.generated_image = image if state is AppState.RESULT else None
        self.error = error if state is AppState.ERROR else None
        logger.debug("State -> %s", state.value)
        if self.on_change:
            self.on_change(state)
