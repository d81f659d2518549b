"""Setup (preflight) services.

Helpers that *verify* external prerequisites the pipeline relies on but does not
create itself (e.g. the Secrets Manager secret holding the GitHub token).
"""
