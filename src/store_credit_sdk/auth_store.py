from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_data_dir
from pydantic import ValidationError as PydanticValidationError

from .models import SessionData

logger = logging.getLogger(__name__)


@dataclass
class AuthStore:
    """Bearer token persisted between runs, one file per environment."""

    app_name: str = "nomos-store"
    app_author: str = "Nomos"
    base_dir: Path | None = None

    def _path(self, env_name: str) -> Path:
        base = self.base_dir or Path(user_data_dir(self.app_name, self.app_author))
        base.mkdir(parents=True, exist_ok=True)
        return base / f"session-{env_name}.json"

    def save(self, session: SessionData) -> None:
        path = self._path(session.env_name or "dev")
        path.write_text(json.dumps(session.model_dump(), indent=2))
        try:
            path.chmod(0o600)
        except OSError:
            logger.warning("auth_store_chmod_failed", extra={"path": str(path)})

    def load(self, env_name: str) -> SessionData | None:
        path = self._path(env_name)
        if not path.exists():
            return None
        try:
            return SessionData.model_validate(json.loads(path.read_text()))
        except (json.JSONDecodeError, PydanticValidationError):
            logger.warning("auth_store_discarded_corrupt_session", extra={"path": str(path)})
            self.clear(env_name)
            return None

    def clear(self, env_name: str) -> None:
        path = self._path(env_name)
        if path.exists():
            path.unlink()
