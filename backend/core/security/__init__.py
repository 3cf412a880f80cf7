"""
core/security - 安全模块

- data_scope: 数据作用域（按作用域隔离数据可见范围）

使用方式:
    >>> from core.security import DataScopeContext, DataScopeLevel
    >>> ctx = DataScopeContext(level=DataScopeLevel.SCOPE_ONLY, scope_ids=frozenset({"1"}))
    >>> ctx.allows("1")
    True
"""

from core.security.data_scope import (
    DataScopeLevel,
    DataScopeContext,
    IDataScopeResolver,
)

__all__ = [
    "DataScopeLevel",
    "DataScopeContext",
    "IDataScopeResolver",
]
