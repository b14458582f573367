"""Shared constants."""

# Pagination defaults
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100

# Display order layout: materialized default fields sit at 999, custom
# fields start at 1000 so default fields always fit below them.
MATERIALIZED_DEFAULT_ORDER = 999
CUSTOM_ORDER_OFFSET = 1000

CUSTOM_FIELD_GROUP = "custom"
DEFAULT_FIELD_GROUP = "default"

# Data types whose attribute definitions must carry options
OPTION_DATA_TYPES = frozenset(["select", "multiselect"])

ATTRIBUTE_NAME_PATTERN = r"^[a-z][a-z0-9_]*$"
