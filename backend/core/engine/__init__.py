"""
core/engine - 核心引擎模块

- state_machine: 状态机引擎（状态转换 + 副作用计算）

使用方式:
    >>> from core.engine import StateMachine, StateMachineConfig, StateTransition
"""

from core.engine.state_machine import (
    SideEffect,
    StateTransition,
    StateMachineConfig,
    StateMachineSnapshot,
    StateMachine,
)

__all__ = [
    "SideEffect",
    "StateTransition",
    "StateMachineConfig",
    "StateMachineSnapshot",
    "StateMachine",
]
