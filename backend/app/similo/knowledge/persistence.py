"""
Weight Persistence

Reads and writes WeightStore state as a versioned flat properties file:

    # Similo dynamic weights
    version=1
    context=form
    default.tag=1.5
    general.tag=1.5
    form.name=1.65

Unprefixed attribute keys (single-vector files) load into the general
context. Loading is tolerant: missing keys keep their current value and
malformed numbers are skipped with a warning.
"""

import logging
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..core.context_classifier import PageContext
from .weight_store import WeightStore

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1
DEFAULT_BLOCK = "default"
CONTEXT_KEY = "context"
VERSION_KEY = "version"

# One IO lock per weights file, shared by every WeightPersistence on it
_path_locks: Dict[Path, threading.Lock] = {}
_path_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = path.resolve()
    with _path_locks_guard:
        lock = _path_locks.get(key)
        if lock is None:
            lock = _path_locks[key] = threading.Lock()
        return lock


class WeightPersistence:
    """Atomic save and tolerant load of weight vectors"""

    def __init__(self, weights_file: str):
        self.path = Path(weights_file)
        self._io_lock = _lock_for(self.path)

    # ==================== Save ====================

    def save(self, store: WeightStore, active_context: Optional[PageContext] = None) -> bool:
        """
        Write the store atomically (unique temp file, then replace).

        The snapshot is taken while holding the file's lock, so the last
        save to finish always carries the newest committed weights.

        Returns:
            True on success. On failure the previous file is untouched.
        """
        with self._io_lock:
            content = self.serialize(store, active_context)
            temp_path: Optional[Path] = None
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with tempfile.NamedTemporaryFile(
                    mode="w",
                    encoding="utf-8",
                    dir=self.path.parent,
                    prefix=self.path.name + ".",
                    suffix=".tmp",
                    delete=False
                ) as temp_file:
                    temp_path = Path(temp_file.name)
                    temp_file.write(content)
                temp_path.replace(self.path)
            except OSError as e:
                logger.warning(f"[WEIGHTS] Could not save weights to {self.path}: {e}")
                if temp_path is not None:
                    try:
                        temp_path.unlink()
                    except OSError:
                        pass
                return False

        logger.info(f"[WEIGHTS] Weights saved to: {self.path}")
        return True

    @staticmethod
    def serialize(store: WeightStore, active_context: Optional[PageContext] = None) -> str:
        snapshot = store.snapshot()
        lines = [
            "# Similo dynamic weights",
            f"# saved {datetime.now(timezone.utc).isoformat()}",
            f"{VERSION_KEY}={FORMAT_VERSION}",
        ]
        if active_context is not None:
            lines.append(f"{CONTEXT_KEY}={active_context.value}")

        blocks: List[Tuple[str, List[float]]] = [(DEFAULT_BLOCK, snapshot[None])]
        blocks.extend((context.value, snapshot[context]) for context in PageContext)

        for label, vector in blocks:
            for attribute, weight in zip(store.attributes, vector):
                lines.append(f"{label}.{attribute}={weight!r}")

        return "\n".join(lines) + "\n"

    # ==================== Load ====================

    def load(self, store: WeightStore) -> Tuple[bool, Optional[PageContext]]:
        """
        Load weights into the store.

        Returns:
            (loaded, pinned_context). When the file cannot be read the store
            is left untouched and (False, None) is returned.
        """
        with self._io_lock:
            try:
                text = self.path.read_text(encoding="utf-8")
            except OSError as e:
                logger.warning(f"[WEIGHTS] Could not load weights from {self.path}: {e}")
                return False, None

        properties = parse_properties(text)
        pending, pinned = self._collect(store, properties)

        # Commit only after the whole file parsed
        for context, values in pending.items():
            vector = store.get_weights(context)
            for attribute, value in values.items():
                vector[store.attributes.index(attribute)] = value
            store.set_weights(context, vector)

        logger.info(f"[WEIGHTS] Weights loaded from: {self.path}")
        return True, pinned

    def _collect(
        self,
        store: WeightStore,
        properties: Dict[str, str]
    ) -> Tuple[Dict[Optional[PageContext], Dict[str, float]], Optional[PageContext]]:
        pending: Dict[Optional[PageContext], Dict[str, float]] = {}
        pinned: Optional[PageContext] = None

        version = properties.pop(VERSION_KEY, None)
        if version is not None:
            try:
                if int(version) > FORMAT_VERSION:
                    logger.warning(
                        f"[WEIGHTS] {self.path} has format version {version}, "
                        f"newer than {FORMAT_VERSION}; loading what is recognised"
                    )
            except ValueError:
                logger.warning(f"[WEIGHTS] Ignoring malformed version '{version}'")

        label = properties.pop(CONTEXT_KEY, None)
        if label:
            pinned = PageContext.parse(label)

        # Unprefixed keys first so explicit general.* entries win
        ordered = sorted(properties.items(), key=lambda item: "." in item[0])

        for key, raw in ordered:
            block, _, attribute = key.rpartition(".")
            if attribute not in store.attributes:
                logger.debug(f"[WEIGHTS] Ignoring unknown key '{key}'")
                continue

            try:
                value = float(raw)
            except ValueError:
                logger.warning(f"[WEIGHTS] Skipping malformed weight {key}={raw!r}")
                continue
            if value != value or value in (float("inf"), float("-inf")):
                logger.warning(f"[WEIGHTS] Skipping non-finite weight {key}={raw!r}")
                continue

            if block == DEFAULT_BLOCK:
                context = None
            elif not block:
                context = PageContext.GENERAL
            else:
                context = PageContext.parse(block)

            pending.setdefault(context, {})[attribute] = value

        return pending, pinned


def parse_properties(text: str) -> Dict[str, str]:
    """Parse key=value lines, skipping blanks and '#'/'!' comments"""
    properties: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or line.startswith("!"):
            continue

        idx = line.find("=")
        if idx <= 0:
            continue
        key = line[:idx].strip()
        value = line[idx + 1:].strip()
        properties[key] = value
    return properties
