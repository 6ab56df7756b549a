from ledgerdeck.db.database import async_session_factory, drop_db, init_db
from ledgerdeck.db.operations import append_entry, count_entries, get_latest_entry

__all__ = [
    "append_entry",
    "async_session_factory",
    "count_entries",
    "drop_db",
    "get_latest_entry",
    "init_db",
]
