"""
HUD - statusline rendering for Claude Code.

Architecture:
- snapshot.py: immutable render input + the Widget protocol
- config.py: baked-in defaults merged with the user override file
- cache.py: file-backed TTL cache shared by every widget
- tokens.py: subagent transcript token counter
- git.py, usage.py: external collaborators (git CLI, usage endpoint)
- logs.py: DEBUG_STATUSLINE-gated file logging for the statusline and hooks
- widgets/: one renderer per statusline fragment
- layout.py: composes enabled widgets into one or more lines

Extensibility points:
1. New widgets: implement the Widget protocol, register in layout.WIDGET_FACTORIES
2. New options: add a field to the widget's config dataclass and DEFAULT_CONFIG
"""
