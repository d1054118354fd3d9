from unittest.mock import Mock

import pytest

from merabuchpan import app
from merabuchpan.config import MissingApiKeyError, Settings


def test_run_refuses_to_start_without_api_key(monkeypatch):
    # arrange
    flet_app = Mock()
    monkeypatch.setattr(app.ft, "app", flet_app)
    monkeypatch.setattr(app, "get_settings", lambda: Settings(_env_file=None))

    # act & assert
    with pytest.raises(MissingApiKeyError):
        app.run()
    flet_app.assert_not_called()


def test_run_starts_window_with_generator(monkeypatch):
    # arrange
    flet_app = Mock()
    generator = Mock()
    monkeypatch.setattr(app.ft, "app", flet_app)
    monkeypatch.setattr(app, "get_settings", lambda: Settings(_env_file=None, API_KEY="secret-key"))
    monkeypatch.setattr(app.ReunionImageGenerator, "from_settings", Mock(return_value=generator))

    # act
    app.run()

    # assert
    target = flet_app.call_args.kwargs["target"]
    assert target.func is app.main
    assert target.keywords == {"generator": generator}
