"""Qualification services used by handlers.

Services are imported lazily by handlers so that importing a handler never
reads configuration or opens connections.
"""

# Do NOT import services here - use lazy loading in handlers instead
