import json
import logging
import os
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class FileThemeLoader:
    """Applies the game's stylesheet and remembers it between sessions.

    ``apply_hook`` is whatever the presentation layer uses to switch styles;
    the chosen URL is stored as JSON at ``store_path``.
    """

    def __init__(self, store_path: str, apply_hook: Optional[Callable[[str], None]] = None):
        self.store_path = store_path
        self.apply_hook = apply_hook
        self.current_url: Optional[str] = None

    def apply(self, url: Optional[str]) -> None:
        if not url:
            return
        self._show(url)
        self._persist(url)

    def restore(self) -> Optional[str]:
        """Re-apply the persisted stylesheet, if there is one."""
        url = self.load()
        if url:
            self._show(url)
        return url

    def _show(self, url: str) -> None:
        self.current_url = url
        if self.apply_hook:
            self.apply_hook(url)
        logger.info(f"[theme-apply] url={url}")

    def load(self) -> Optional[str]:
        try:
            with open(self.store_path, encoding='utf-8') as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            logger.warning(f"[theme-load] ignoring unreadable store {self.store_path}: {exc}")
            return None
        return data.get('style_url') if isinstance(data, dict) else None

    def _persist(self, url: str) -> None:
        directory = os.path.dirname(self.store_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.store_path, 'w', encoding='utf-8') as fh:
            json.dump({'style_url': url}, fh)
