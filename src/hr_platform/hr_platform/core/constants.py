"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
DEFAULT_LIST_LIMIT = 200
MAX_LIST_LIMIT = 500

DEFAULT_LANGUAGE = "en"
DEFAULT_TX_ISOLATION_LEVEL = "REPEATABLE READ"

HOURS_QUANTUM = "0.01"
