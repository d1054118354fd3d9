"""MeraBuchpan - reunite with your inner child.

This package provides a GUI application that merges a childhood photo and a
recent photo of the same person into one image using Google's Gemini image
model.

Modules:
    config: Environment-driven settings and the API credential check.
    photos: Selected photos, MIME sniffing, base64 payloads and saving.
    generation: The Gemini generation client.
    controller: The initial/loading/result/error state machine.
    ui: The Flet window.

Example:
    >>> import flet as ft
    >>> from merabuchpan.ui import main
    >>> ft.app(target=main)
"""

from merabuchpan.config import MissingApiKeyError, Settings, get_settings, require_api_key
from merabuchpan.controller import (
    MISSING_INPUT_MESSAGE,
    UNKNOWN_ERROR_MESSAGE,
    AppState,
    ReunionController,
)
from merabuchpan.generation import (
    GENERATION_FAILED_MESSAGE,
    REUNION_PROMPT,
    GeneratedImage,
    GenerationError,
    ReunionImageGenerator,
    create_client,
)
from merabuchpan.photos import ImageSaver, SelectedPhoto, encode_payload, load_photo, to_data_url

__version__ = "0.1.0"

__all__ = [
    # Constants
    "REUNION_PROMPT",
    "GENERATION_FAILED_MESSAGE",
    "MISSING_INPUT_MESSAGE",
    "UNKNOWN_ERROR_MESSAGE",
    # Data classes
    "SelectedPhoto",
    "GeneratedImage",
    "Settings",
    "AppState",
    # Classes
    "ReunionController",
    "ReunionImageGenerator",
    "ImageSaver",
    # Errors
    "GenerationError",
    "MissingApiKeyError",
    # Functions
    "create_client",
    "encode_payload",
    "get_settings",
    "load_photo",
    "require_api_key",
    "to_data_url",
]
