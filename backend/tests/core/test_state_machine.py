"""
状态机引擎单元测试
"""
import pytest
from core.engine.state_machine import StateMachine, StateMachineConfig, StateTransition


def _machine(current=None, transitions=None):
    transitions = transitions or [
        StateTransition("draft", "open", "publish", side_effects=[lambda ctx: {"opened_by": ctx.get("actor")}]),
        StateTransition("open", "closed", "close"),
        StateTransition("draft", "closed", "discard"),
    ]
    return StateMachine(
        config=StateMachineConfig(
            name="Ticket",
            states=["draft", "open", "closed"],
            transitions=transitions,
            initial_state="draft",
        ),
        current_state=current,
    )


class TestStateMachine:
    """状态机基本行为"""

    def test_initial_state(self):
        assert _machine().current_state == "draft"
        assert _machine(current="open").current_state == "open"

    def test_valid_transition_collects_effects(self):
        machine = _machine()
        assert machine.transition_to("open", context={"actor": "u1"}) is True
        assert machine.current_state == "open"
        assert machine.last_effects() == {"opened_by": "u1"}

    def test_invalid_transition_keeps_state(self):
        machine = _machine(current="closed")
        assert machine.transition_to("open") is False
        assert machine.current_state == "closed"
        assert machine.last_effects() == {}

    def test_unknown_state_rejected(self):
        assert _machine().can_transition_to("archived") is False

    def test_trigger_must_match_target(self):
        machine = _machine()
        assert machine.can_transition_to("closed", trigger="publish") is False
        assert machine.can_transition_to("closed", trigger="discard") is True

    def test_available_targets(self):
        assert sorted(_machine().available_targets()) == ["closed", "open"]
        assert _machine(current="closed").available_targets() == []

    def test_condition_blocks_transition(self):
        machine = _machine(transitions=[
            StateTransition("draft", "open", "publish", condition=lambda ctx: ctx.get("ready", False)),
        ])
        assert machine.transition_to("open", context={"ready": False}) is False
        assert machine.transition_to("open", context={"ready": True}) is True

    def test_failing_condition_treated_as_disallowed(self):
        def broken(ctx):
            raise RuntimeError("boom")

        machine = _machine(transitions=[StateTransition("draft", "open", "publish", condition=broken)])
        assert machine.can_transition_to("open") is False

    def test_later_effects_override_earlier(self):
        machine = _machine(transitions=[
            StateTransition("draft", "open", "publish", side_effects=[
                lambda ctx: {"a": 1, "b": 1},
                lambda ctx: {"b": 2},
            ]),
        ])
        machine.transition_to("open")
        assert machine.last_effects() == {"a": 1, "b": 2}

    def test_history_and_reset(self):
        machine = _machine()
        machine.transition_to("open")
        machine.transition_to("closed")
        history = machine.get_history()
        assert [(h.previous_state, h.current_state) for h in history] == [("draft", "open"), ("open", "closed")]
        assert history[1].trigger == "close"

        machine.reset()
        assert machine.current_state == "draft"
        assert machine.get_history() == []


@pytest.mark.parametrize("state", ["draft", "open"])
def test_reset_to_explicit_state(state):
    machine = _machine(current="closed")
    machine.reset(state)
    assert machine.current_state == state
