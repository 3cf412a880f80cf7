"""
core/engine/state_machine.py

状态机引擎 - 支持状态转换校验和副作用计算

副作用函数不直接修改实体，而是返回需要变更的字段字典，
由调用方（服务层）在持久化时统一应用。
"""
from typing import Dict, List, Any, Optional, Callable
from dataclasses import dataclass, field
import time
import logging

logger = logging.getLogger(__name__)

SideEffect = Callable[[Dict[str, Any]], Dict[str, Any]]


@dataclass
class StateTransition:
    """
    状态转换定义

    Attributes:
        from_state: 源状态
        to_state: 目标状态
        trigger: 触发动作
        condition: 可选的转换条件
        side_effects: 副作用函数列表，每个函数接收上下文并返回字段变更
    """

    from_state: str
    to_state: str
    trigger: str
    condition: Optional[Callable[[Dict[str, Any]], bool]] = None
    side_effects: List[SideEffect] = field(default_factory=list)

    def is_allowed(self, context: Dict[str, Any]) -> bool:
        """检查转换是否被允许"""
        if self.condition is None:
            return True
        try:
            return bool(self.condition(context))
        except Exception as e:
            logger.error(f"Error checking transition condition: {e}")
            return False

    def collect_side_effects(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """依次执行副作用函数并合并字段变更，后执行的覆盖先执行的"""
        changes: Dict[str, Any] = {}
        for effect in self.side_effects:
            changes.update(effect(context) or {})
        return changes


@dataclass
class StateMachineConfig:
    """
    状态机配置

    Attributes:
        name: 状态机名称
        states: 所有状态的列表
        transitions: 转换列表
        initial_state: 初始状态
    """

    name: str
    states: List[str]
    transitions: List[StateTransition]
    initial_state: str


@dataclass
class StateMachineSnapshot:
    """
    状态机快照 - 记录一次已执行的转换

    Attributes:
        previous_state: 转换前状态
        current_state: 转换后状态
        trigger: 触发动作
        effects: 副作用产生的字段变更
        timestamp: 快照时间
    """

    previous_state: str
    current_state: str
    trigger: str
    effects: Dict[str, Any]
    timestamp: float


class StateMachine:
    """
    状态机引擎

    特性：
    - 状态转换验证
    - 副作用计算（返回字段变更，不修改实体）
    - 历史记录（用于审计）

    Example:
        >>> machine = StateMachine(
        ...     config=StateMachineConfig(
        ...         name="Booking",
        ...         states=["pending", "confirmed"],
        ...         transitions=[StateTransition("pending", "confirmed", "confirm")],
        ...         initial_state="pending"
        ...     )
        ... )
        >>> machine.transition_to("confirmed", "confirm")
        True
        >>> machine.last_effects()
        {}
    """

    def __init__(self, config: StateMachineConfig, current_state: Optional[str] = None):
        self._config = config
        self._current_state = current_state if current_state is not None else config.initial_state
        self._history: List[StateMachineSnapshot] = []
        self._transition_map: Dict[str, Dict[str, StateTransition]] = {}

        # 构建转换映射: from_state -> trigger -> transition
        for t in config.transitions:
            self._transition_map.setdefault(t.from_state, {})[t.trigger] = t

    @property
    def current_state(self) -> str:
        """获取当前状态"""
        return self._current_state

    @property
    def config(self) -> StateMachineConfig:
        """获取状态机配置"""
        return self._config

    def find_transition(self, target_state: str, trigger: Optional[str] = None) -> Optional[StateTransition]:
        """
        查找从当前状态到目标状态的转换

        Args:
            target_state: 目标状态
            trigger: 触发动作，为 None 时按目标状态匹配第一个转换

        Returns:
            转换定义，不存在时返回 None
        """
        transitions = self._transition_map.get(self._current_state, {})
        if trigger is not None:
            transition = transitions.get(trigger)
            if transition is None or transition.to_state != target_state:
                return None
            return transition
        for transition in transitions.values():
            if transition.to_state == target_state:
                return transition
        return None

    def available_targets(self) -> List[str]:
        """当前状态可以到达的目标状态"""
        return [t.to_state for t in self._transition_map.get(self._current_state, {}).values()]

    def can_transition_to(self, target_state: str, trigger: Optional[str] = None,
                          context: Optional[Dict[str, Any]] = None) -> bool:
        """
        检查是否可以转换到目标状态

        Args:
            target_state: 目标状态
            trigger: 触发动作
            context: 可选的上下文数据

        Returns:
            True 如果转换被允许
        """
        if target_state not in self._config.states:
            return False

        transition = self.find_transition(target_state, trigger)
        if transition is None:
            return False

        return transition.is_allowed(context or {})

    def transition_to(self, target_state: str, trigger: Optional[str] = None,
                      context: Optional[Dict[str, Any]] = None) -> bool:
        """
        执行状态转换

        Args:
            target_state: 目标状态
            trigger: 触发动作
            context: 可选的上下文数据

        Returns:
            True 如果转换成功
        """
        context = context or {}
        if not self.can_transition_to(target_state, trigger, context):
            logger.warning(
                f"Invalid transition in {self._config.name}: "
                f"{self._current_state} -> {target_state} (trigger: {trigger})"
            )
            return False

        transition = self.find_transition(target_state, trigger)
        effects = transition.collect_side_effects(context)

        previous_state = self._current_state
        self._current_state = target_state
        self._history.append(StateMachineSnapshot(
            previous_state=previous_state,
            current_state=target_state,
            trigger=transition.trigger,
            effects=effects,
            timestamp=time.time(),
        ))

        logger.info(
            f"{self._config.name} transition: {previous_state} -> {target_state} "
            f"(trigger: {transition.trigger})"
        )
        return True

    def last_effects(self) -> Dict[str, Any]:
        """最近一次转换产生的字段变更"""
        if not self._history:
            return {}
        return dict(self._history[-1].effects)

    def get_history(self) -> List[StateMachineSnapshot]:
        """获取转换历史"""
        return list(self._history)

    def reset(self, state: Optional[str] = None) -> None:
        """
        重置状态机

        Args:
            state: 要重置到的状态，如果为 None 则使用初始状态
        """
        self._current_state = state if state is not None else self._config.initial_state
        self._history.clear()


# 导出
__all__ = [
    "SideEffect",
    "StateTransition",
    "StateMachineConfig",
    "StateMachineSnapshot",
    "StateMachine",
]
