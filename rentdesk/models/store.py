import atexit
import copy
import os
import pickle
import threading
from pathlib import Path

from rentdesk.utils.constants import Collection, DEFAULT_SETTINGS, Role
from rentdesk.utils.security import generate_hash

# ---- Paths ----
BASE_DIR = Path(__file__).resolve().parents[2]
DEFAULT_DATA_PATH = BASE_DIR / "data.pkl"

DEFAULT_SUPERADMIN = {
    "id": "u1",
    "username": "super",
    "name": "Super Admin",
    "role": Role.SUPERADMIN,
}
DEFAULT_SUPERADMIN_PASSWORD = "Super123"


class Store:
    """
    Storage gateway: named collections with whole-value get/set semantics,
    persisted to a single pickle file.
    """

    _inst = None
    _inst_lock = threading.Lock()
    _atexit_registered = False

    def __init__(self, path: str | os.PathLike | None = None):
        self.path = str(path or DEFAULT_DATA_PATH)
        self.data: dict[str, object] = {}
        self._rw = threading.RLock()

        print(f"[Store] Using file: {self.path}")
        self._load()

        # Defaults are written only for a missing or empty file
        # (to avoid clobbering seeded or test data)
        if not self.data:
            self.data[Collection.SETTINGS] = copy.deepcopy(DEFAULT_SETTINGS)
            self.data[Collection.USERS] = [
                dict(DEFAULT_SUPERADMIN, password_hash=generate_hash(DEFAULT_SUPERADMIN_PASSWORD)),
            ]
            self._dump()

        # Automatically save on exit (skipped in test environments)
        if not Store._atexit_registered and os.getenv("APP_ENV") != "test":
            atexit.register(self.save)
            Store._atexit_registered = True

    # ---------- Singleton ----------
    @classmethod
    def instance(cls, path: str | os.PathLike | None = None):
        """Return the global singleton instance of Store."""
        with cls._inst_lock:
            if cls._inst is None:
                cls._inst = Store(path or DEFAULT_DATA_PATH)
        return cls._inst

    # ---------- Persistence ----------
    def _load(self):
        """Load data from the pickle file, or start empty if unavailable or invalid."""
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path, "rb") as f:
                data = pickle.load(f)
        except (OSError, pickle.UnpicklingError, EOFError) as e:
            print(f"[Store] Load failed ({e}); starting empty.")
            return

        if isinstance(data, dict):
            self.data = data
            sizes = ", ".join(f"{k}={len(v)}" for k, v in data.items() if isinstance(v, list))
            print(f"[Store] Loaded: {sizes}")
        else:
            # Handle incompatible data format: backup the old file and start empty
            try:
                bak = self.path + ".bak"
                os.replace(self.path, bak)
                print(f"[Store] Incompatible store ({type(data).__name__}); backed up to {bak}. Starting empty.")
            except OSError as e:
                print(f"[Store] Backup failed: {e}")

    def _dump(self):
        """Write the in-memory data to the pickle file safely (atomic replace)."""
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        tmp = self.path + ".tmp"
        with open(tmp, "wb") as f:
            pickle.dump(self.data, f, protocol=pickle.HIGHEST_PROTOCOL)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, self.path)

    def save(self):
        """Thread-safe save method."""
        with self._rw:
            print(f"[Store] Saving to {self.path} ...")
            self._dump()

    # ---------- Gateway ----------
    def get(self, key: str, default=None):
        """Return a private copy of the stored collection, or `default` when absent."""
        with self._rw:
            if key not in self.data:
                return default
            return copy.deepcopy(self.data[key])

    def set(self, key: str, value) -> None:
        """Replace the stored collection wholesale and persist. Write errors propagate."""
        with self._rw:
            self.data[key] = copy.deepcopy(value)
            self._dump()

    def clear(self) -> None:
        with self._rw:
            self.data = {}
            self._dump()


def _store():
    return Store.instance()
