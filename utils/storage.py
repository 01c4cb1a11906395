import json
import logging
import os
import platform
from pathlib import Path
from typing import Optional, Dict, Any, List

from settings import CREDENTIALS_FILE

logger = logging.getLogger(__name__)


class CredentialStore:
    """Named long-lived credentials with one selected entry

    File layout::

        {"token": "<selected value or empty>",
         "tokens": [{"name": "...", "value": "..."}]}
    """

    def __init__(self, credentials_file: Optional[str] = None):
        self.credentials_path = Path(credentials_file if credentials_file else CREDENTIALS_FILE)
        self._ensure_secure_directory()

    def _ensure_secure_directory(self):
        """Create parent directory with secure permissions"""
        parent_dir = self.credentials_path.parent
        if not parent_dir.exists():
            parent_dir.mkdir(parents=True, exist_ok=True)
            if platform.system() != "Windows":
                os.chmod(parent_dir, 0o700)

    def _load(self) -> Dict[str, Any]:
        if not self.credentials_path.exists():
            return {"token": "", "tokens": []}
        try:
            data = json.loads(self.credentials_path.read_text())
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Ignoring unreadable credentials file {self.credentials_path}: {e}")
            return {"token": "", "tokens": []}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring credentials file {self.credentials_path}: expected a JSON object")
            return {"token": "", "tokens": []}
        tokens = data.get("tokens")
        if not isinstance(tokens, list):
            tokens = []
        token = data.get("token")
        return {
            "token": token if isinstance(token, str) else "",
            "tokens": [t for t in tokens if isinstance(t, dict) and isinstance(t.get("value"), str) and t["value"]],
        }

    def _save(self, data: Dict[str, Any]):
        self.credentials_path.write_text(json.dumps(data, indent=2))
        if platform.system() != "Windows":
            os.chmod(self.credentials_path, 0o600)

    def list_tokens(self) -> List[Dict[str, str]]:
        return self._load()["tokens"]

    def get_selected_token(self) -> Optional[str]:
        """Return the selected credential value, stripped, or None"""
        token = self._load()["token"].strip()
        return token or None

    def add_token(self, name: str, value: str) -> Dict[str, str]:
        """Store a credential and make it the selected one

        Raises:
            ValueError: if value is blank
        """
        value = (value or "").strip()
        if not value:
            raise ValueError("credential value must not be empty")
        data = self._load()
        entry = {"name": (name or "").strip() or f"Token {len(data['tokens']) + 1}", "value": value}
        data["tokens"].append(entry)
        data["token"] = value
        self._save(data)
        logger.info(f"Stored credential '{entry['name']}' ({value[:10]}...)")
        return entry

    def select_token(self, index: Optional[int]) -> Optional[str]:
        """Select a stored credential by index; None clears the selection

        Raises:
            IndexError: if index is out of range
        """
        data = self._load()
        if index is None:
            data["token"] = ""
        else:
            data["token"] = data["tokens"][index]["value"]
        self._save(data)
        return data["token"] or None

    def delete_token(self, index: int) -> Dict[str, str]:
        """Delete a stored credential, clearing the selection if it pointed at it

        Raises:
            IndexError: if index is out of range
        """
        data = self._load()
        removed = data["tokens"].pop(index)
        if data["token"] == removed["value"]:
            data["token"] = ""
        self._save(data)
        logger.info(f"Deleted credential '{removed['name']}'")
        return removed

    @property
    def credentials_file(self) -> Path:
        return self.credentials_path


class FallbackTokenStore:
    """Read-only view of another integration's settings file

    Only its ``token`` field is consulted, as the last credential source.
    """

    def __init__(self, settings_file: Optional[str] = None):
        self.settings_path = Path(settings_file) if settings_file else None

    def get_token(self) -> Optional[str]:
        if self.settings_path is None or not self.settings_path.exists():
            return None
        try:
            data = json.loads(self.settings_path.read_text())
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Ignoring unreadable fallback settings {self.settings_path}: {e}")
            return None
        token = data.get("token") if isinstance(data, dict) else None
        if isinstance(token, str) and token.strip():
            return token.strip()
        return None
