"""Docker host installer (Ubuntu server, CasaOS, optional NVIDIA GPU).

Core design goals:
- One ordered pass, no resume
- Confirmation before anything destructive or optional
- Explicit flags passed from producer steps to consumer steps
- Fail fast on the first failed command
- Centralized logging
"""

__all__ = []
