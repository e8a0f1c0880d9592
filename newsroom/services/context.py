from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from newsroom.content_rules import LayoutRules, build_layout_rules
from newsroom.core.settings import settings
from newsroom.stores.contracts import Stores


@dataclass
class ResolveContext:
    """Todo lo que una pasada de resolución necesita: stores, reglas y reloj."""
    stores: Stores
    rules: LayoutRules = field(default_factory=build_layout_rules)
    max_depth: int = settings.RESOLVE_MAX_DEPTH
    site_url: str = settings.SITE_URL
    home_url: str = settings.HOME
    now: Optional[datetime] = None
    _options: Optional[Dict[str, Any]] = field(default=None, repr=False)

    def clock(self) -> datetime:
        return self.now or datetime.now(timezone.utc)

    def options(self) -> Dict[str, Any]:
        # leído una vez por request; el store es de solo lectura
        if self._options is None:
            self._options = self.stores.options()
        return self._options
