"""
Testes da máquina de estados de interação.

Cobre estados, grafo de transições, guards e a máquina em si.
"""

import logging

import pytest

from fsm import (
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    GuardResult,
    InteractionState,
    InteractionStateMachine,
    StateTransition,
    create_fsm,
    evaluate_guards,
    get_valid_targets,
    is_terminal,
    is_transition_valid,
    is_valid_state,
    validate_transition_map,
)


class TestInteractionStates:
    """Testes para InteractionState."""

    def test_terminal_states(self) -> None:
        """Apenas RECEIVED e ACKNOWLEDGED não são terminais."""
        non_terminal = set(InteractionState) - TERMINAL_STATES
        assert non_terminal == {InteractionState.RECEIVED, InteractionState.ACKNOWLEDGED}

    def test_default_initial_state(self) -> None:
        assert DEFAULT_INITIAL_STATE is InteractionState.RECEIVED
        assert not is_terminal(DEFAULT_INITIAL_STATE)

    def test_is_valid_state(self) -> None:
        assert is_valid_state("DELIVERED")
        assert not is_valid_state("TRIAGE")

    def test_str_is_value(self) -> None:
        assert str(InteractionState.PONGED) == "PONGED"


class TestTransitionRules:
    """Testes do grafo de transições."""

    def test_transition_map_is_consistent(self) -> None:
        assert validate_transition_map() == []

    def test_every_state_mapped(self) -> None:
        assert set(VALID_TRANSITIONS) == set(InteractionState)

    @pytest.mark.parametrize(
        "target",
        [InteractionState.PONGED, InteractionState.RESPONDED, InteractionState.ACKNOWLEDGED],
    )
    def test_received_targets(self, target: InteractionState) -> None:
        assert is_transition_valid(InteractionState.RECEIVED, target)

    def test_received_cannot_deliver_directly(self) -> None:
        """Follow-up só existe depois do ack diferido."""
        assert not is_transition_valid(InteractionState.RECEIVED, InteractionState.DELIVERED)

    def test_no_transition_back_to_acknowledged(self) -> None:
        for state in set(InteractionState) - {InteractionState.RECEIVED}:
            assert InteractionState.ACKNOWLEDGED not in get_valid_targets(state)

    def test_terminal_states_have_no_targets(self) -> None:
        for state in TERMINAL_STATES:
            assert get_valid_targets(state) == frozenset()


class TestGuards:
    """Testes dos guards."""

    def test_terminal_guard_denies(self) -> None:
        result = evaluate_guards(InteractionState.DELIVERED, InteractionState.REPORTED)
        assert isinstance(result, GuardResult)
        assert result.allowed is False
        assert "terminal" in (result.reason or "")

    def test_same_state_guard_denies(self) -> None:
        result = evaluate_guards(InteractionState.RECEIVED, InteractionState.RECEIVED)
        assert result.allowed is False

    def test_invalid_state_guard_denies(self) -> None:
        result = evaluate_guards("RECEIVED", InteractionState.PONGED)  # type: ignore[arg-type]
        assert result.allowed is False

    def test_allowed_transition(self) -> None:
        assert evaluate_guards(InteractionState.RECEIVED, InteractionState.PONGED).allowed


class TestInteractionStateMachine:
    """Testes para InteractionStateMachine."""

    def test_deferred_flow(self) -> None:
        """RECEIVED → ACKNOWLEDGED → DELIVERED com histórico."""
        fsm = create_fsm("int-1")

        assert fsm.transition(InteractionState.ACKNOWLEDGED, "deferred_ack").success
        result = fsm.transition(InteractionState.DELIVERED, "followup_delivered", {"n": 1})

        assert result.success
        assert isinstance(result.transition, StateTransition)
        assert fsm.current_state is InteractionState.DELIVERED
        assert fsm.is_terminal
        assert [t.trigger for t in fsm.history] == ["deferred_ack", "followup_delivered"]
        assert fsm.history[1].metadata == {"n": 1}

    def test_terminal_state_blocks_second_followup(self) -> None:
        fsm = create_fsm("int-2")
        fsm.transition(InteractionState.ACKNOWLEDGED, "deferred_ack")
        fsm.transition(InteractionState.REPORTED, "followup_reported")

        result = fsm.transition(InteractionState.DELIVERED, "followup_delivered")

        assert not result.success
        assert fsm.current_state is InteractionState.REPORTED
        assert len(fsm.history) == 2

    def test_invalid_transition_reason(self) -> None:
        fsm = InteractionStateMachine("int-3")

        result = fsm.transition(InteractionState.ABANDONED, "x")

        assert not result.success
        assert "RECEIVED" in (result.error_reason or "")

    def test_advance_raises_and_logs(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.ERROR)
        fsm = create_fsm("int-4", InteractionState.PONGED)

        with pytest.raises(RuntimeError):
            fsm.advance(InteractionState.RESPONDED, "x")

        assert any(r.message == "interaction_transition_rejected" for r in caplog.records)

    def test_can_transition_to(self) -> None:
        fsm = create_fsm("int-5")
        assert fsm.can_transition_to(InteractionState.PONGED)
        assert not fsm.can_transition_to(InteractionState.DELIVERED)
        assert fsm.get_valid_targets() == VALID_TRANSITIONS[InteractionState.RECEIVED]

    def test_summaries(self) -> None:
        fsm = create_fsm("int-6")
        fsm.advance(InteractionState.PONGED, "ping")

        summary = fsm.get_state_summary()
        history = fsm.get_history_summary()

        assert summary == {
            "interaction_id": "int-6",
            "current_state": "PONGED",
            "is_terminal": True,
            "transition_count": 1,
        }
        assert len(history) == 1
        assert history[0]["trigger"] == "ping"
