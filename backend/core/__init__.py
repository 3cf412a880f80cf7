"""
core - 领域无关的框架层

包含：
- engine: 核心引擎（状态机）
- security: 安全模块（数据作用域）

使用方式:
    >>> from core.engine.state_machine import StateMachine, StateMachineConfig
    >>> from core.security.data_scope import DataScopeContext, DataScopeLevel
"""

__version__ = "0.1.0"
