"""Internal constants shared across the library."""

DEFAULT_DATA_DIR = "BLG"
KEY_ITEM_PREFAB = "{CCFD8AA837B9611A}Prefabs/Items/CarKey/CarKey.et"
NOTIFY_TITLE = "Garage"
RECORD_FILE_SUFFIX = ".json"

DEFAULT_MAX_VEHICLES_PER_PLAYER = 10
DEFAULT_STORE_RADIUS = 10.0
DEFAULT_SPAWN_CLEAR_RADIUS = 1.0
