"""Shared constants for cit."""

# Sentinel sha of the "uncommitted changes" pseudo-commit
UNCOMMITTED_SHA = "--------"

SHORT_SHA_LEN = 7

# git's default --date format, e.g. "Mon Jan 2 15:04:05 2006 -0700"
GIT_DATE_FORMAT = "%a %b %d %H:%M:%S %Y %z"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_POLL_INTERVAL = 0.5
DEFAULT_STATUS_MAX_LENGTH = 60
DEFAULT_RESOLVER_WORKERS = 4
DEFAULT_LOG_LEVEL = "WARNING"
