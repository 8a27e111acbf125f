from pathlib import Path

from codebridge.needle import needle

from .messaging.bus import bus

# Packaged message templates: assets/needle/<lang>/*.json
ASSETS_ROOT = Path(__file__).parent / "assets"
needle.add_root(ASSETS_ROOT)

__all__ = ["bus", "ASSETS_ROOT"]
