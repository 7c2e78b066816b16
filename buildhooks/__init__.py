"""buildhooks - lifecycle hooks for build tools.

Fires named build events to in-process listeners and to executable hook
scripts kept inside the project.
"""

__version__ = "0.3.0"
