"""Common literal values used across techdoc.

Discriminator names, decoder defaults, and endpoint fragments live here so the
classifier, the HTTP client, and the tests import the same values without
drifting. Intended for internal use within the techdoc package.

Examples
--------
>>> from techdoc import _constants
>>> _constants.TASK_GROUP_KIND
'taskGroup'
>>> _constants.DEFAULT_MAX_DEPTH
64
"""

CONTENT_DISCRIMINATOR = "type"
TOPIC_DISCRIMINATOR = "kind"
TASK_GROUP_KIND = "taskGroup"

DEFAULT_MAX_DEPTH = 64
DIFF_AVAILABILITY_POLICIES = ("strict", "skip")

DEFAULT_API_BASE = "https://developer.apple.com/tutorials/data"
DOCUMENTATION_SEGMENT = "documentation"
IDENTIFIER_PREFIX = "doc://"
USER_AGENT = "techdoc/0.1"
