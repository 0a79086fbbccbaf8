"""Export of generated scene images."""

import base64
import binascii
import io
import logging
import time
import zipfile
from pathlib import Path
from typing import Iterable, Optional

from .models import Scene, SceneStatus

logger = logging.getLogger(__name__)


def decode_image(image_ref: str) -> bytes:
    """Decode a ``data:...;base64,`` URI (or bare base64) to raw bytes."""
    payload = image_ref.partition(",")[2] if image_ref.startswith("data:") else image_ref
    try:
        return base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Image payload is not valid base64: {e}") from e


def archive_entry_name(scene: Scene) -> str:
    return f"Scene_{scene.id:02d}.png"


class ArchivePackager:
    """Collects named binary entries into a zip archive."""

    def __init__(self) -> None:
        self._entries: list[tuple[str, bytes]] = []

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self._entries]

    def add(self, name: str, data: bytes) -> None:
        self._entries.append((name, data))

    def build(self) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for name, data in self._entries:
                zf.writestr(name, data)
        return buffer.getvalue()


class ExportAssembler:
    """Writes completed scene images to an output directory."""

    def __init__(self, output_dir: Path) -> None:
        self._output_dir = Path(output_dir)

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def export_all(self, scenes: Iterable[Scene]) -> Optional[Path]:
        """Zip every completed scene image.

        Entries are named after the scene's own id, so gaps left by
        unfinished scenes stay visible.

        Returns:
            Path of the written archive, or None if no scene has an image.
        """
        completed = [
            s for s in scenes
            if s.status == SceneStatus.COMPLETED and s.image_url
        ]
        if not completed:
            logger.info("No completed scenes to export")
            return None

        packager = ArchivePackager()
        for scene in completed:
            packager.add(archive_entry_name(scene), decode_image(scene.image_url))

        self._output_dir.mkdir(parents=True, exist_ok=True)
        path = self._output_dir / f"cinegen_storyboard_{int(time.time() * 1000)}.zip"
        path.write_bytes(packager.build())
        logger.info(f"Exported {len(packager)} scenes to {path}")
        return path

    def export_single(self, scene: Scene) -> Optional[Path]:
        if not scene.image_url:
            return None

        self._output_dir.mkdir(parents=True, exist_ok=True)
        path = self._output_dir / f"Scene_{scene.id}.png"
        path.write_bytes(decode_image(scene.image_url))
        logger.info(f"Exported scene {scene.id} to {path}")
        return path
