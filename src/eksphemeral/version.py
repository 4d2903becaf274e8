"""Single source of truth for the eksphemeral version.

Release builds overwrite this constant at packaging time; the value
checked into the tree is the development version.
"""

from __future__ import annotations

__version__: str = "0.3.0"
