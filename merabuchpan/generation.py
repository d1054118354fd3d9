"""Gemini client that merges a childhood photo and a recent photo.

One request per generation: both photos as inline image parts followed by a
fixed instruction, asking the model for an image-only response. Whatever goes
wrong (unusable input, a failed call, a response without an image) surfaces
to callers as a single GenerationError with a fixed, user-presentable message.
The underlying cause is chained and logged for diagnostics.

Typical usage:
    from merabuchpan.config import get_settings
    from merabuchpan.generation import ReunionImageGenerator

    generator = ReunionImageGenerator.from_settings(get_settings())
    image = generator.generate(child_photo, adult_photo)
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from google import genai
from google.genai import types

from merabuchpan.config import DEFAULT_MODEL_NAME, Settings, require_api_key
from merabuchpan.photos import SelectedPhoto

logger = logging.getLogger(__name__)

REUNION_PROMPT: str = (
    "You are a photo editing expert. Your task is to merge two photographs into a "
    "single, heartwarming image. The first image is a childhood photo, and the second "
    "is a recent photo of the same person as an adult. Create a new image where the "
    "adult from the recent photo is gently hugging the child from the childhood photo. "
    "Ensure the interaction looks natural and emotionally resonant. Both figures should "
    "be clearly visible and well-integrated. Replace the original backgrounds entirely "
    "with a seamless, soft, and smooth off-white studio background. Apply natural, soft "
    "lighting to create a tender and nostalgic mood. The final output should be a "
    "single, photorealistic image."
)
"""Fixed instruction sent with every generation request."""

GENERATION_FAILED_MESSAGE: str = (
    "Failed to generate the image. The model may be unavailable or the request "
    "may have been blocked."
)
"""The only message callers ever see for a failed generation."""

DEFAULT_RESULT_MIME_TYPE: str = "image/png"


class GenerationError(Exception):
    """Generation failed. The message is always GENERATION_FAILED_MESSAGE."""

    def __init__(self) -> None:
        super().__init__(GENERATION_FAILED_MESSAGE)


@dataclass(frozen=True)
class GeneratedImage:
    """Image returned by the model.

    Attributes:
        data: Image bytes exactly as the service returned them.
        mime_type: MIME type reported by the service.
    """

    data: bytes
    mime_type: str = DEFAULT_RESULT_MIME_TYPE


# =============================================================================
# PURE FUNCTIONS - Request and Response Handling
# =============================================================================


def encode_photo(photo: SelectedPhoto) -> types.Part:
    """Turn a selected photo into an inline-data request part.

    The SDK carries inline data base64-encoded in the request body.

    Raises:
        ValueError: If the photo has no content or no MIME type.
    """
    if not photo.data:
        raise ValueError(f"Photo {photo.name!r} is empty")
    if not photo.mime_type:
        raise ValueError(f"Photo {photo.name!r} has no MIME type")
    return types.Part.from_bytes(data=photo.data, mime_type=photo.mime_type)


def build_generation_config() -> types.GenerateContentConfig:
    return types.GenerateContentConfig(response_modalities=[types.Modality.IMAGE])


def extract_image(response: Any) -> Optional[GeneratedImage]:
    """Return the first inline image in the first candidate, if any.

    Text parts the model may emit ahead of the image are skipped.
    """
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None

    content = candidates[0].content
    parts = (content.parts if content is not None else None) or []
    for part in parts:
        inline_data = part.inline_data
        if inline_data is not None and inline_data.data:
            return GeneratedImage(
                data=inline_data.data,
                mime_type=inline_data.mime_type or DEFAULT_RESULT_MIME_TYPE,
            )
    return None


# =============================================================================
# SIDE EFFECTS - Remote Calls
# =============================================================================


def create_client(settings: Settings) -> genai.Client:
    """Build the Gemini client from settings.

    Raises:
        MissingApiKeyError: If no API key is configured.
    """
    return genai.Client(api_key=require_api_key(settings))


class ReunionImageGenerator:
    """Main interface to the image model.

    Attributes:
        client: A ``google.genai.Client`` (or anything exposing
            ``models.generate_content``).
        model_name: Model identifier passed with every request.
    """

    def __init__(self, client: Any, model_name: str = DEFAULT_MODEL_NAME) -> None:
        self.client = client
        self.model_name: str = model_name

    @classmethod
    def from_settings(cls, settings: Settings) -> "ReunionImageGenerator":
        return cls(create_client(settings), settings.model_name)

    def generate(
        self, child_photo: SelectedPhoto, adult_photo: SelectedPhoto
    ) -> GeneratedImage:
        """Merge the two photos into one image.

        Args:
            child_photo: The childhood photo, sent first.
            adult_photo: The recent photo, sent second.

        Returns:
            The generated image, bytes untouched.

        Raises:
            GenerationError: On any failure. The original exception is
                available as ``__cause__``.
        """
        try:
            contents = [encode_photo(child_photo), encode_photo(adult_photo), REUNION_PROMPT]
            logger.debug(
                "Requesting reunion image from %s (child=%s, adult=%s)",
                self.model_name,
                child_photo.mime_type,
                adult_photo.mime_type,
            )
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=contents,
                config=build_generation_config(),
            )
            image = extract_image(response)
            if image is None:
                raise ValueError("Could not extract image data from the API response.")
        except Exception as e:
            logger.exception("Error generating image with %s", self.model_name)
            raise GenerationError() from e

        logger.info("Generated %s image (%d bytes)", image.mime_type, len(image.data))
        return image
