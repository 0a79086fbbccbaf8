"""Google Imagen API client wrapper via Vertex AI."""

import logging
from typing import Optional

import google.auth
import google.auth.transport.requests
import requests
from google.auth import exceptions as auth_exceptions

from ..config import config
from ..errors import MissingImagePartError, NoCandidateError, ProviderError
from ..models import AspectRatio

logger = logging.getLogger(__name__)

IMAGE_PROMPT_TEMPLATE = (
    "Cinematic, {style}. Visual description: {prompt}. "
    "High quality, detailed, 8k, consistent aesthetic."
)


def build_image_prompt(prompt: str, style: str) -> str:
    return IMAGE_PROMPT_TEMPLATE.format(style=style, prompt=prompt)


def to_data_uri(payload: str, mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,{payload}"


class ImagenClient:
    """Client wrapper for Google Imagen image generation via Vertex AI."""

    DEFAULT_LOCATION = "us-central1"
    SCOPES = ["https://www.googleapis.com/auth/cloud-platform"]

    def __init__(
        self,
        project_id: Optional[str] = None,
        location: str = DEFAULT_LOCATION,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the Imagen client.

        Args:
            project_id: Google Cloud project ID.
            location: GCP region for Vertex AI.
            model: Imagen model name.
            timeout: Per-request timeout in seconds.
            session: HTTP session, mainly for tests.
        """
        self._project_id = project_id or config.google_cloud_project
        self._location = location
        self._model = model or config.imagen_model
        self._timeout = timeout or config.provider_timeout
        self._session = session or requests.Session()

        if not self._project_id:
            raise ValueError("GOOGLE_CLOUD_PROJECT not set")

    @property
    def project_id(self) -> str:
        return self._project_id

    @property
    def model(self) -> str:
        return self._model

    @property
    def endpoint(self) -> str:
        return (
            f"https://{self._location}-aiplatform.googleapis.com/v1/"
            f"projects/{self._project_id}/locations/{self._location}/"
            f"publishers/google/models/{self._model}:predict"
        )

    def _access_token(self) -> str:
        credentials, _ = google.auth.default(scopes=self.SCOPES)
        credentials.refresh(google.auth.transport.requests.Request())
        return credentials.token

    def generate_image(
        self,
        prompt: str,
        style: str,
        aspect_ratio: AspectRatio = AspectRatio.LANDSCAPE,
    ) -> str:
        """Generate one image for a scene.

        Args:
            prompt: Scene description (may be a synthetic fallback label).
            style: Global style descriptor.
            aspect_ratio: Landscape or portrait.

        Returns:
            The image as a ``data:image/png;base64,...`` URI.

        Raises:
            NoCandidateError: If the response holds no prediction.
            MissingImagePartError: If the prediction holds no image bytes.
            ProviderError: On transport, auth or API errors.
        """
        request_body = {
            "instances": [{"prompt": build_image_prompt(prompt, style)}],
            "parameters": {
                "sampleCount": 1,
                "aspectRatio": AspectRatio(aspect_ratio).value,
            },
        }

        try:
            headers = {
                "Authorization": f"Bearer {self._access_token()}",
                "Content-Type": "application/json",
            }
            logger.info(f"Generating image with Imagen: {prompt[:50]}...")
            response = self._session.post(
                self.endpoint, json=request_body, headers=headers, timeout=self._timeout
            )
        except (requests.RequestException, auth_exceptions.GoogleAuthError) as e:
            logger.error(f"Image generation failed: {e}")
            raise ProviderError(f"Imagen request failed: {e}") from e

        if response.status_code != 200:
            error_msg = f"{response.status_code}: {response.text[:500]}"
            logger.error(f"Imagen API error: {error_msg}")
            raise ProviderError(f"Imagen API error {error_msg}")

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(f"Invalid JSON from Imagen: {e}") from e

        predictions = data.get("predictions") or []
        if not predictions:
            raise NoCandidateError("No response generated.")

        prediction = predictions[0]
        image_data = prediction.get("bytesBase64Encoded")
        if not image_data:
            raise MissingImagePartError("Image part not found.")

        return to_data_uri(image_data, prediction.get("mimeType", "image/png"))
