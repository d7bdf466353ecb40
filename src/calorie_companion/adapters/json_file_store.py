"""Key-value store persisted to a local JSON file."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from calorie_companion.services.tracker import KeyValueStore

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileStore(KeyValueStore):
    """Store that reads the whole file once and rewrites it on every change."""

    path: Path
    _data: dict[str, object] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self.path = Path(self.path)
        self._data = _read_file(self.path)

    def get(self, key: str, default: object = None) -> object:
        """Return the stored value or the default."""
        return self._data.get(key, default)

    def set(self, key: str, value: object) -> None:
        """Store a JSON-serializable value and flush the file."""
        encoded = json.loads(json.dumps(value))
        self._data[key] = encoded
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)


def _read_file(path: Path) -> dict[str, object]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        _logger.warning("Ignoring unreadable data file: %s", path)
        return {}
    if not isinstance(data, dict):
        _logger.warning("Ignoring data file without a top-level object: %s", path)
        return {}
    return data
