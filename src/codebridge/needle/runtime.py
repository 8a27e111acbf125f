import os
from pathlib import Path
from typing import Dict, List, Optional, Set, Union

from .loader import Loader
from .pointer import SemanticPointer

LANG_ENV_VAR = "CODE_BRIDGE_LANG"


class Needle:
    """
    Resolves semantic pointers to message templates.

    Templates live in `<root>/needle/<lang>/*.json` (packaged assets) or
    `<root>/.code-bridge/needle/<lang>/*.json` (project overrides). Roots
    added later take precedence over earlier ones.
    """

    def __init__(self, roots: Optional[List[Path]] = None):
        self.default_lang = "en"
        self.roots: List[Path] = list(roots or [])
        self._registry: Dict[str, Dict[str, str]] = {}  # lang -> {key: template}
        self._loader = Loader()
        self._loaded_langs: Set[str] = set()

    def add_root(self, path: Path):
        """Registers a search root after the existing ones."""
        if path in self.roots:
            return
        self.roots.append(path)
        # Force a reload so the new root's overrides apply
        self._registry.clear()
        self._loaded_langs.clear()

    def _ensure_lang_loaded(self, lang: str):
        if lang in self._loaded_langs:
            return

        merged_registry: Dict[str, str] = {}
        # Order matters: later roots override earlier ones.
        for root in self.roots:
            # Packaged assets: needle/<lang>
            asset_path = root / "needle" / lang
            if asset_path.is_dir():
                merged_registry.update(self._loader.load_directory(asset_path))

            # Project overrides: .code-bridge/needle/<lang>
            hidden_path = root / ".code-bridge" / "needle" / lang
            if hidden_path.is_dir():
                merged_registry.update(self._loader.load_directory(hidden_path))

        self._registry[lang] = merged_registry
        self._loaded_langs.add(lang)

    def get(
        self, pointer: Union[SemanticPointer, str], lang: Optional[str] = None
    ) -> str:
        """
        Lookup order: target language, default language, then the key itself.
        """
        key = str(pointer)
        target_lang = lang or os.getenv(LANG_ENV_VAR, self.default_lang)

        # 1. Target language
        self._ensure_lang_loaded(target_lang)
        val = self._registry.get(target_lang, {}).get(key)
        if val is not None:
            return val

        # 2. Default language, if different
        if target_lang != self.default_lang:
            self._ensure_lang_loaded(self.default_lang)
            val = self._registry.get(self.default_lang, {}).get(key)
            if val is not None:
                return val

        # 3. Identity: the key itself
        return key


# Global runtime instance
needle = Needle()
