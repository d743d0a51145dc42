"""
JSON storage for generated snapshots.

Snapshots are written in their plain camelCase form (UniverseSnapshot.to_dict),
which is what consuming applications read back.
"""

from __future__ import annotations
import json
import gzip
from enum import Enum
from pathlib import Path
from typing import Dict, List, Any, Union
from dataclasses import asdict, is_dataclass
import numpy as np


class SnapshotEncoder(json.JSONEncoder):
    """JSON encoder for numpy scalars, enums and snapshot dataclasses."""

    def default(self, obj):
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        if isinstance(obj, np.bool_):
            return bool(obj)
        if isinstance(obj, Enum):
            return obj.value
        if hasattr(obj, 'to_dict'):
            return obj.to_dict()
        if is_dataclass(obj) and not isinstance(obj, type):
            return asdict(obj)
        return super().default(obj)


def _open_text(filepath: Path, mode: str):
    if filepath.suffix == '.gz':
        return gzip.open(filepath, mode + 't', encoding='utf-8')
    return open(filepath, mode, encoding='utf-8')


class JSONStorage:
    """
    Directory of JSON documents (plain or gzipped).

    Example:
        storage = JSONStorage("output")
        storage.save(snapshot, "seed-42", compress=True)
        data = storage.load("seed-42")
    """

    EXTENSIONS = ['', '.json', '.json.gz']

    def __init__(self, base_path: Union[str, Path]):
        """
        Args:
            base_path: Base directory for storage (created if missing)
        """
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def save(
        self,
        data: Any,
        filename: str,
        compress: bool = False,
    ) -> Path:
        """
        Save data to a JSON file.

        Args:
            data: Snapshot, config or plain data
            filename: Filename (without extension)
            compress: Use gzip compression

        Returns:
            Path to saved file
        """
        ext = '.json.gz' if compress else '.json'
        filepath = self.base_path / f"{filename}{ext}"
        with _open_text(filepath, 'w') as f:
            json.dump(data, f, cls=SnapshotEncoder, indent=None if compress else 2)
        return filepath

    def _resolve(self, filename: str) -> Path:
        for ext in self.EXTENSIONS:
            filepath = self.base_path / f"{filename}{ext}"
            if filepath.is_file():
                return filepath
        raise FileNotFoundError(f"No JSON file found for {filename}")

    def load(self, filename: str) -> Any:
        """Load data from a JSON file (extension optional)."""
        with _open_text(self._resolve(filename), 'r') as f:
            return json.load(f)

    def list_files(self, pattern: str = "*.json*") -> List[Path]:
        return sorted(self.base_path.glob(pattern))

    def exists(self, filename: str) -> bool:
        try:
            self._resolve(filename)
        except FileNotFoundError:
            return False
        return True

    def delete(self, filename: str) -> bool:
        """Delete file if it exists."""
        try:
            filepath = self._resolve(filename)
        except FileNotFoundError:
            return False
        filepath.unlink()
        return True


def save_snapshot(
    snapshot: Any,
    filepath: Union[str, Path],
    compress: bool = False,
) -> Path:
    """
    Write one snapshot to an explicit path.

    Args:
        snapshot: UniverseSnapshot or its to_dict() form
        filepath: Target path; a '.gz' suffix implies compression
        compress: Force gzip compression

    Returns:
        Path to saved file
    """
    filepath = Path(filepath)
    if compress and filepath.suffix != '.gz':
        filepath = filepath.with_name(filepath.name + '.gz')
    filepath.parent.mkdir(parents=True, exist_ok=True)

    data = snapshot.to_dict() if hasattr(snapshot, 'to_dict') else snapshot
    with _open_text(filepath, 'w') as f:
        json.dump(data, f, cls=SnapshotEncoder, indent=None if filepath.suffix == '.gz' else 2)
    return filepath


def load_snapshot(filepath: Union[str, Path]) -> Dict[str, Any]:
    """Read a snapshot document written by save_snapshot."""
    with _open_text(Path(filepath), 'r') as f:
        return json.load(f)
