"""Version information for gh-activity.

Single source of truth for version number.
Follows PEP 440 and semantic versioning principles.
"""

__version__ = "1.2.0"
__version_info__ = tuple(int(part) for part in __version__.split("."))

# Version history:
# 1.2.0 - Paginated activity endpoint, single-page repository listing
# 1.1.0 - Concurrent commit fetching over a bounded worker pool
# 1.0.0 - Initial release (repository + commit activity for a user)
