from __future__ import annotations

from typing import Mapping, Optional, Protocol


class SettingsRepository(Protocol):
    def get_all(self) -> dict[str, Optional[str]]:
        raise NotImplementedError

    def upsert_many(self, values: Mapping[str, Optional[str]]) -> None:
        raise NotImplementedError
