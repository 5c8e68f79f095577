"""
Constants for mirror operations.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

# Default table name
DEFAULT_TABLE_NAME = "wp-mirror-tool"

# Default local artifact root
DEFAULT_ARTIFACT_ROOT = "./public"

# Sync coordinator timing (in seconds)
DEFAULT_SYNC_INTERVAL = 3600  # 1 hour
DEFAULT_LOCK_LEASE = 3900  # 65 minutes, must exceed a full sync run
DEFAULT_LOCK_NAME = "wp_updater_lock"

# Download queue and workers
DEFAULT_QUEUE_NAME = "download_queue"
DEFAULT_WORKERS = 5
DEFAULT_HTTP_TIMEOUT = 60.0
DOWNLOAD_CHUNK_SIZE = 1 << 20

# Blocking pop polling behavior
POP_BACKOFF_BASE = 0.1  # Start with 100ms
POP_BACKOFF_MAX = 5.0  # Max 5 seconds between polls
POP_BACKOFF_FACTOR = 2.0  # Exponential backoff factor

# Upstream endpoints
WP_CORE_API_URL = "https://api.wordpress.org/core/version-check/1.7/"
WP_PLUGINS_API_URL = (
    "https://api.wordpress.org/plugins/info/1.2/?action=query_plugins&request[per_page]=100"
)
WP_THEMES_API_URL = (
    "https://api.wordpress.org/themes/info/1.1/?action=query_themes&request[per_page]=100"
)

# Core has no identifier of its own
CORE_IDENTIFIER = "wordpress"

# Namespace prefixes for DynamoDB keys
PREFIX_VERSIONS = "versions"
PREFIX_LOCK = "lock"
PREFIX_QUEUE = "queue"

# Separator between identifier and version in version sort keys
SK_SEPARATOR = "#"

# DynamoDB attribute names
ATTR_PK = "PK"
ATTR_SK = "SK"
ATTR_VALUE = "value"
ATTR_TYPE = "type"
ATTR_TTL = "ttl"
ATTR_METADATA = "metadata"
ATTR_IDENTIFIER = "identifier"
ATTR_VERSION = "version"
ATTR_CREATED_AT = "created_at"
ATTR_UPDATED_AT = "updated_at"
ATTR_FETCHED_AT = "fetched_at"
