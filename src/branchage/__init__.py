"""Git branch age tool.

Features:
- Fetch from a remote (branches, tags, pruning) before looking at branches
- List local and remote-tracking branches by the age of their last commit
- Clean up branches older than a threshold, with confirmation
- Branch protection patterns
"""

__version__ = "0.1.0"
