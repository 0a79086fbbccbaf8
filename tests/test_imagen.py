"""Tests for the Imagen client."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from cinegen.errors import MissingImagePartError, NoCandidateError, ProviderError
from cinegen.models import AspectRatio
from cinegen.services.imagen import ImagenClient, build_image_prompt


def make_client(status_code=200, payload=None, post_error=None):
    session = MagicMock()
    if post_error:
        session.post.side_effect = post_error
    else:
        response = MagicMock(status_code=status_code, text="error body")
        response.json.return_value = payload or {}
        session.post.return_value = response
    client = ImagenClient(project_id="proj", model="imagen-test", timeout=5, session=session)
    return client, session


@pytest.fixture(autouse=True)
def fake_token():
    with patch.object(ImagenClient, "_access_token", return_value="token"):
        yield


def test_returns_data_uri_and_sends_request():
    client, session = make_client(payload={"predictions": [{"bytesBase64Encoded": "QUJD"}]})

    result = client.generate_image("a castle", "noir", AspectRatio.PORTRAIT)

    assert result == "data:image/png;base64,QUJD"
    _, kwargs = session.post.call_args
    assert kwargs["json"]["parameters"]["aspectRatio"] == "9:16"
    assert kwargs["json"]["instances"][0]["prompt"] == build_image_prompt("a castle", "noir")
    assert kwargs["headers"]["Authorization"] == "Bearer token"
    assert kwargs["timeout"] == 5


def test_no_predictions():
    client, _ = make_client(payload={"predictions": []})
    with pytest.raises(NoCandidateError):
        client.generate_image("x", "noir")


def test_prediction_without_bytes():
    client, _ = make_client(payload={"predictions": [{"mimeType": "image/png"}]})
    with pytest.raises(MissingImagePartError):
        client.generate_image("x", "noir")


def test_http_error():
    client, _ = make_client(status_code=429)
    with pytest.raises(ProviderError):
        client.generate_image("x", "noir")


def test_transport_error_wrapped():
    client, _ = make_client(post_error=requests.Timeout("slow"))
    with pytest.raises(ProviderError):
        client.generate_image("x", "noir")


def test_requires_project():
    with patch("cinegen.services.imagen.config") as cfg:
        cfg.google_cloud_project = ""
        with pytest.raises(ValueError):
            ImagenClient()


def test_image_prompt_template():
    prompt = build_image_prompt("a hero", "noir")
    assert prompt.startswith("Cinematic, noir. Visual description: a hero.")
