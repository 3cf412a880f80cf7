"""
core/security/data_scope.py

数据作用域：领域无关的数据隔离抽象

定义用户的可见范围级别和作用域上下文。
app 层通过实现 IDataScopeResolver 注入具体的隔离语义（如按分店隔离）。
"""
from enum import Enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Hashable, Iterable, List, Optional, FrozenSet, TypeVar

T = TypeVar("T")


class DataScopeLevel(str, Enum):
    """用户的数据可见范围级别"""
    ALL = "all"                 # 看到所有数据
    SCOPE_ONLY = "scope_only"   # 仅本作用域


@dataclass(frozen=True)
class DataScopeContext:
    """当前用户的数据作用域上下文"""
    level: DataScopeLevel = DataScopeLevel.ALL
    scope_ids: FrozenSet[Hashable] = field(default_factory=frozenset)
    user_id: Optional[Any] = None

    @property
    def is_unrestricted(self) -> bool:
        """是否不受作用域限制"""
        return self.level == DataScopeLevel.ALL

    def allows(self, scope_id: Hashable) -> bool:
        """检查单个作用域 ID 是否可见"""
        if self.is_unrestricted:
            return True
        return scope_id in self.scope_ids

    def allows_any(self, scope_ids: Iterable[Hashable]) -> bool:
        """检查多个作用域 ID 中是否有任一可见"""
        if self.is_unrestricted:
            return True
        return any(sid in self.scope_ids for sid in scope_ids)

    def filter(self, items: Iterable[T], key: Callable[[T], Hashable]) -> List[T]:
        """按作用域过滤列表，保持原有顺序"""
        if self.is_unrestricted:
            return list(items)
        return [item for item in items if key(item) in self.scope_ids]


class IDataScopeResolver(ABC):
    """数据作用域解析器接口：app 层实现"""

    @abstractmethod
    def resolve_scope(self, role: str, scope_ids: Iterable[Hashable],
                      user_id: Optional[Any] = None) -> DataScopeContext:
        """根据角色和分配的作用域，解析出可见范围"""
        ...


__all__ = [
    "DataScopeLevel",
    "DataScopeContext",
    "IDataScopeResolver",
]
