"""
Application Layer

Ports to the outside world, the playback orchestrator, and the command and
query handlers the front-end calls into.
"""
