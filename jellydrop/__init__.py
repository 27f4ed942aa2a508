"""
jellydrop — clipboard and drop-folder watcher for a home media server.

Watches the clipboard for YouTube links and magnet URIs and a drop folder
for finished downloads, then hands each detected item to an external
handler process under a bounded concurrency ceiling.

Subpackages:
    watchfolders — drop folder scanning and file stability probing
    clipboard    — clipboard snapshot diffing and link classification
    jobs         — job registry, dispatcher, reaper and history log
    runtime      — instance lock, shutdown coordination, control loop
    config       — pydantic settings and JSON loading
    readiness    — startup checks ("doctor")
    monitoring   — optional read-only status API
"""

__version__ = "1.0.0"
