import os
import logging
import tempfile
from pathlib import Path
from typing import Union, Optional, Any
from collections.abc import Iterable, Iterator, Mapping, MutableMapping
import orjson
from .vault import CredentialGuard, get_default_guard
from .vault.exceptions import CredentialError
from .vault.migration import migrate_fields, decrypt_fields

logger = logging.getLogger("credential_guard")

KEY_ID_FIELD = "__key_id__"


class ProtectedSettings(MutableMapping[str, Any]):
    """Settings dict-like object backed by a JSON file.

    Fields listed in ``protected_fields`` are stored encrypted: assigning
    a value encrypts it, reading it returns the decrypted value. Every
    other field is stored as-is.

    Legacy plaintext secrets found on ``load()`` are migrated to the
    encrypted format and the settings are marked as changed.
    """

    def __init__(
        self,
        path: Union[str, Path],
        protected_fields: Iterable[str],
        *,
        guard: Optional[CredentialGuard] = None,
        defaults: Optional[Mapping[str, Any]] = None
    ) -> None:
        self._path = Path(path)
        self._protected = frozenset(protected_fields)
        self._guard = guard or get_default_guard()
        self._data: dict[str, Any] = {}
        self._changed = False
        self._key_id: Optional[str] = None
        if defaults:
            for key, value in defaults.items():
                self._set_value(key, value)
            self._changed = False

    def __repr__(self) -> str:
        # values may be secrets, only keys are shown
        return (
            f'<ProtectedSettings [{self._path}, changed:{self._changed}] '
            f'keys={list(self._data.keys())}, protected={sorted(self._protected)}>'
        )

    # --- Storage helpers ---

    def _get_value(self, key: str) -> Any:
        value = self._data[key]
        if key in self._protected and isinstance(value, str):
            return self._guard.decrypt(value)
        return value

    def _set_value(self, key: str, value: Any) -> None:
        if key == KEY_ID_FIELD:
            raise KeyError(f"{KEY_ID_FIELD} is reserved")
        if key in self._protected and isinstance(value, str):
            value = self._guard.encrypt(value)
        self._data[key] = value
        self._changed = True

    def _del_value(self, key: str) -> None:
        del self._data[key]
        self._changed = True

    # --- Properties ---

    @property
    def path(self) -> Path:
        return self._path

    @property
    def protected_fields(self) -> frozenset:
        return self._protected

    @property
    def stored_key_id(self) -> Optional[str]:
        """Key identifier read from the file by the last ``load()``."""
        return self._key_id

    @property
    def is_changed(self) -> bool:
        return self._changed

    @is_changed.setter
    def is_changed(self, value: bool) -> None:
        self._changed = value

    def raw(self, key: str) -> Any:
        """Return the stored (encrypted, for protected fields) value."""
        return self._data[key]

    def to_dict(self) -> dict:
        """Return a copy with every protected field decrypted."""
        return decrypt_fields(self._guard, self._data, self._protected)

    # --- Magic Methods ---

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __getitem__(self, key: str) -> Any:
        return self._get_value(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self._set_value(key, value)

    def __delitem__(self, key: str) -> None:
        self._del_value(key)

    # --- Persistence ---

    def _current_key_id(self) -> Optional[str]:
        try:
            return self._guard.key_id()
        except CredentialError as err:
            logger.error("Unable to compute key identifier: %s", err)
            return None

    def _check_key_id(self) -> None:
        if self._key_id is None:
            return
        if not any(self._guard.is_encrypted(v) for v in self._data.values()):
            return
        current = self._current_key_id()
        if current is not None and current != self._key_id:
            logger.warning(
                "Settings %s were encrypted with key %s but the current key is %s; "
                "the device fingerprint has changed and stored API keys "
                "cannot be decrypted. They must be re-entered.",
                self._path, self._key_id, current,
            )

    def load(self) -> "ProtectedSettings":
        """load.

            Read the settings file and migrate legacy plaintext secrets.
        A missing file leaves the current (default) values untouched.

        Raises:
            RuntimeError: The file is not a JSON object.

        Returns:
            ProtectedSettings: self, for chaining.
        """
        if not self._path.exists():
            logger.debug("Settings file %s not found, using defaults", self._path)
            return self
        try:
            data = orjson.loads(self._path.read_bytes())
        except orjson.JSONDecodeError as err:
            raise RuntimeError(err) from err
        if not isinstance(data, dict):
            raise RuntimeError(
                f"Settings file {self._path} must contain a JSON object"
            )
        self._key_id = data.pop(KEY_ID_FIELD, None)
        self._data.update(data)
        self._changed = False
        updates = migrate_fields(self._guard, self._data, self._protected)
        if updates:
            self._data.update(updates)
            self._changed = True
        self._check_key_id()
        return self

    def _write_atomic(self, content: bytes) -> None:
        # each save gets its own temp file so overlapping saves never collide
        temp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="wb",
                dir=self._path.parent,
                prefix=f".tmp_{self._path.name}_",
                suffix=".tmp",
                delete=False,
            ) as temp_file:
                temp_path = Path(temp_file.name)
                if hasattr(os, "fchmod"):
                    os.fchmod(temp_file.fileno(), 0o600)
                temp_file.write(content)
                temp_file.flush()
                os.fsync(temp_file.fileno())
            temp_path.replace(self._path)
            temp_path = None
        except Exception:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            raise

    def save(self) -> None:
        """save.

            Write the settings atomically, readable only by the owner.
        Raises:
            RuntimeError: Error converting data to json.
        """
        payload = dict(self._data)
        key_id = self._current_key_id()
        if key_id is not None:
            payload[KEY_ID_FIELD] = key_id
        try:
            content = orjson.dumps(payload, option=orjson.OPT_INDENT_2)
        except orjson.JSONEncodeError as err:
            raise RuntimeError(err) from err
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._write_atomic(content)
        self._key_id = key_id
        self._changed = False
        logger.debug("Settings saved to %s", self._path)
