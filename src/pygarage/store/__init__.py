"""Record persistence layer.

One JSON file per player; every garage operation reloads, mutates and
saves within a single call, so nothing here is cached between requests.
"""

from pygarage.store.records import RecordStore, record_path

__all__ = ["RecordStore", "record_path"]
