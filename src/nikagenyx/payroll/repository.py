from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import PayrollMode


class PayrollModeRepository(Protocol):
    """Single-row setting: the payroll mode applied to every employee."""

    def get_mode(self) -> Optional[PayrollMode]:
        raise NotImplementedError

    def set_mode(self, mode: PayrollMode) -> None:
        raise NotImplementedError
