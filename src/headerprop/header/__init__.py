"""Header detection, caching and copy-merge."""
