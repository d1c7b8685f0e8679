"""
Hazard event deduplication for HazardWatch.

At-most-once gate keyed by (hazard id, lifecycle event kind).
"""

from collections import OrderedDict
from typing import Optional
from .models import LifecycleKind

def event_key(hazard_id: str, kind: LifecycleKind) -> str:
    """(위험 ID, 생애주기 종류) 쌍의 중복 제거 키"""
    return f"{hazard_id}:{kind}"

class HazardEventDeduplicator:
    """
    세션 단위 중복 제거 필터.

    처음 본 키에만 True를 반환하고 기록합니다. max_keys가 None이면
    세션 동안 키를 축출하지 않으며, 값이 주어지면 가장 오래 전에
    확인된 키부터 축출합니다 (LRU).
    """

    def __init__(self, max_keys: Optional[int] = None):
        if max_keys is not None and max_keys < 1:
            raise ValueError(f"max_keys는 1 이상이어야 합니다: {max_keys}")
        self.max_keys = max_keys
        self._seen: "OrderedDict[str, None]" = OrderedDict()

    def should_surface(self, key: str) -> bool:
        if key in self._seen:
            self._seen.move_to_end(key)
            return False
        self._seen[key] = None
        if self.max_keys is not None and len(self._seen) > self.max_keys:
            self._seen.popitem(last=False)
        return True

    def __contains__(self, key: str) -> bool:
        return key in self._seen

    def __len__(self) -> int:
        return len(self._seen)
