from unittest.mock import Mock

import pytest
from google.genai import types

from merabuchpan import generation
from merabuchpan.config import MissingApiKeyError, Settings
from merabuchpan.generation import (
    GENERATION_FAILED_MESSAGE,
    REUNION_PROMPT,
    GeneratedImage,
    GenerationError,
    ReunionImageGenerator,
    create_client,
    extract_image,
)
from merabuchpan.photos import SelectedPhoto

_expected_image = b"\x89PNG\r\n\x1a\n generated reunion bytes"


def _response(*parts: types.Part) -> types.GenerateContentResponse:
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=list(parts)))]
    )


def _image_part(data: bytes = _expected_image, mime_type: str = "image/png") -> types.Part:
    return types.Part(inline_data=types.Blob(data=data, mime_type=mime_type))


def _generator(response=None, error: Exception = None) -> ReunionImageGenerator:
    client = Mock()
    if error is not None:
        client.models.generate_content.side_effect = error
    else:
        client.models.generate_content.return_value = response
    return ReunionImageGenerator(client, "gemini-test-image")


def test_generate_returns_service_bytes_unchanged(child_photo, adult_photo):
    # arrange
    generator = _generator(_response(_image_part()))

    # act
    result = generator.generate(child_photo, adult_photo)

    # assert
    assert result == GeneratedImage(data=_expected_image, mime_type="image/png")


def test_generate_sends_both_photos_then_prompt(child_photo, adult_photo):
    # arrange
    generator = _generator(_response(_image_part()))

    # act
    generator.generate(child_photo, adult_photo)

    # assert
    kwargs = generator.client.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "gemini-test-image"
    child_part, adult_part, prompt = kwargs["contents"]
    assert child_part.inline_data.data == child_photo.data
    assert child_part.inline_data.mime_type == "image/png"
    assert adult_part.inline_data.data == adult_photo.data
    assert adult_part.inline_data.mime_type == "image/jpeg"
    assert prompt == REUNION_PROMPT
    assert kwargs["config"].response_modalities == [types.Modality.IMAGE]


def test_generate_skips_leading_text_part(child_photo, adult_photo):
    # arrange
    generator = _generator(
        _response(types.Part(text="Here is your image"), _image_part(mime_type="image/jpeg"))
    )

    # act
    result = generator.generate(child_photo, adult_photo)

    # assert
    assert result.data == _expected_image
    assert result.mime_type == "image/jpeg"


def test_generate_hides_service_error(child_photo, adult_photo):
    # arrange
    cause = RuntimeError("429 RESOURCE_EXHAUSTED: quota for project 1234 exceeded")
    generator = _generator(error=cause)

    # act
    with pytest.raises(GenerationError) as exc_info:
        generator.generate(child_photo, adult_photo)

    # assert
    assert str(exc_info.value) == GENERATION_FAILED_MESSAGE
    assert exc_info.value.__cause__ is cause


@pytest.mark.parametrize(
    "response",
    [
        _response(types.Part(text="I can't help with that.")),
        types.GenerateContentResponse(candidates=[]),
        types.GenerateContentResponse(),
    ],
)
def test_generate_fails_without_image(child_photo, adult_photo, response):
    # arrange
    generator = _generator(response)

    # act & assert
    with pytest.raises(GenerationError, match="Failed to generate the image"):
        generator.generate(child_photo, adult_photo)


def test_generate_fails_on_unusable_photo(adult_photo):
    # arrange
    generator = _generator(_response(_image_part()))
    empty = SelectedPhoto(data=b"", mime_type="image/png", name="empty.png")

    # act
    with pytest.raises(GenerationError) as exc_info:
        generator.generate(empty, adult_photo)

    # assert
    assert str(exc_info.value) == GENERATION_FAILED_MESSAGE
    generator.client.models.generate_content.assert_not_called()


def test_extract_image_defaults_mime_type():
    # arrange
    response = _response(types.Part(inline_data=types.Blob(data=b"raw")))

    # act
    image = extract_image(response)

    # assert
    assert image == GeneratedImage(data=b"raw", mime_type="image/png")


def test_create_client_requires_api_key():
    with pytest.raises(MissingApiKeyError):
        create_client(Settings(_env_file=None))


def test_from_settings_uses_key_and_model(monkeypatch):
    # arrange
    client_cls = Mock()
    monkeypatch.setattr(generation.genai, "Client", client_cls)
    settings = Settings(_env_file=None, API_KEY="secret-key", model_name="gemini-test-image")

    # act
    generator = ReunionImageGenerator.from_settings(settings)

    # assert
    client_cls.assert_called_once_with(api_key="secret-key")
    assert generator.client is client_cls.return_value
    assert generator.model_name == "gemini-test-image"
