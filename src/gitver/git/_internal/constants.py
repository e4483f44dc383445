"""Internal pygit2 constants - keeps trivia out of public modules."""

from __future__ import annotations

import pygit2

# Working tree status flags that do not make a repository dirty
STATUS_WT_NEW = pygit2.GIT_STATUS_WT_NEW
STATUS_IGNORED = pygit2.GIT_STATUS_IGNORED

NOT_DIRTY_FLAGS = STATUS_WT_NEW | STATUS_IGNORED
