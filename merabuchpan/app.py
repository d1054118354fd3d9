"""Application launcher.

Loads settings, configures logging and builds the generation client before
the window opens, so a missing API key stops the process with
MissingApiKeyError.
"""

import functools
import logging

import flet as ft

from merabuchpan.config import get_settings
from merabuchpan.generation import ReunionImageGenerator
from merabuchpan.ui import main


def run() -> None:
    """Launch the MeraBuchpan window."""
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format=settings.log_fmt)

    generator = ReunionImageGenerator.from_settings(settings)
    logging.getLogger(__name__).info("Starting MeraBuchpan with model %s", settings.model_name)
    ft.app(target=functools.partial(main, generator=generator))
