"""
Tests for the game service decision pipeline.

Async methods are driven with asyncio.run so no plugin is needed.
"""

import asyncio
import random

import pytest
from pokerarena.agents.base import BaseAgent
from pokerarena.agents.fallback import FallbackAgent
from pokerarena.agents.random_agent import CallAgent, RandomAgent
from pokerarena.core.actions import Action, ActionType
from pokerarena.core.errors import GameOver
from pokerarena.core.game import GameSettings
from pokerarena.core.rules import GameMode
from pokerarena.server.service import GameService
from pokerarena.server.storage import GameNotFound


MODELS = ("alpha", "beta", "gamma")


class SlowAgent(BaseAgent):
    """Never answers within the timeout."""

    def act(self, state):
        return Action.fold()

    async def act_async(self, state):
        await asyncio.sleep(1)
        return self.act(state)


class FixedAgent(BaseAgent):
    """Always proposes the same thing, legal or not."""

    def __init__(self, model, proposal):
        super().__init__(model)
        self.proposal = proposal

    def act(self, state):
        return self.proposal


class BrokenAgent(BaseAgent):
    def act(self, state):
        raise RuntimeError("model unavailable")


class RecordingAgent(CallAgent):
    """Calls and remembers every state it observed."""

    def __init__(self, model):
        super().__init__(model)
        self.seen = []
        self.was_reset = False

    def observe(self, state):
        self.seen.append(state)

    def reset(self):
        self.seen = []
        self.was_reset = True


def _service():
    return GameService(rng=random.Random(0))


def _start(service, agents=(), **settings):
    settings = GameSettings(models=MODELS, win_threshold=1.0, **settings)
    return service.start_game(GameMode.SMART, settings, agents=agents, game_id="g")


class TestStartGame:
    """Tests for starting and registering."""

    def test_start_game_stores_state(self):
        """Starting a game deals the first hand and stores it."""
        service = _service()
        state = _start(service)
        assert service.repository.get("g") is state
        assert state.hand_number == 1
        assert state.current_player.model == "beta"

    def test_generated_ids_are_unique(self):
        """Games without an id get a fresh one."""
        service = _service()
        a = service.start_game(GameMode.FAST)
        b = service.start_game(GameMode.FAST)
        assert a.id != b.id
        assert len(service.repository) == 2

    def test_register_unknown_model(self):
        """An agent must match a seat."""
        service = _service()
        _start(service)
        with pytest.raises(ValueError):
            service.register_agent("g", CallAgent("delta"))

    def test_unclaimed_seat_gets_fallback_agent(self):
        """Seats without an agent play the fallback."""
        service = _service()
        _start(service)
        assert isinstance(service.agent_for("g", "beta"), FallbackAgent)


class TestDecisionPipeline:
    """Tests for timeouts, agent errors and illegal proposals."""

    def test_legal_action_is_used(self):
        """A legal proposal is applied as is."""
        service = _service()
        _start(service, agents=[CallAgent("beta")])
        result = asyncio.run(service.step("g"))
        assert not result.used_fallback
        assert result.log.model == "beta"
        assert result.log.action == ActionType.CALL
        assert not result.hand_ended

    def test_timeout_uses_fallback(self):
        """A slow agent is replaced by the fallback action."""
        service = _service()
        _start(service, agents=[SlowAgent("beta")], action_timeout_ms=50)
        result = asyncio.run(service.step("g"))
        assert result.used_fallback
        assert result.log.action == ActionType.CALL
        assert result.log.amount == 20
        assert result.log.response_time_ms == 50

    def test_illegal_proposal_uses_fallback(self):
        """An illegal proposal is replaced by the fallback action."""
        service = _service()
        _start(service, agents=[FixedAgent("beta", Action.check())])
        result = asyncio.run(service.step("g"))
        assert result.used_fallback
        assert result.log.action == ActionType.CALL
        assert result.log.amount == 20

    def test_non_action_uses_fallback(self):
        """Anything that is not an Action is replaced."""
        service = _service()
        _start(service, agents=[FixedAgent("beta", "fold please")])
        result = asyncio.run(service.step("g"))
        assert result.used_fallback

    def test_agent_error_uses_fallback(self):
        """An agent that raises is replaced."""
        service = _service()
        _start(service, agents=[BrokenAgent("beta")])
        result = asyncio.run(service.step("g"))
        assert result.used_fallback
        assert result.state.players[1].current_bet == 20

    def test_state_is_stored(self):
        """The new state is written back to the repository."""
        service = _service()
        _start(service)
        result = asyncio.run(service.step("g"))
        assert service.repository.get("g") is result.state
        assert len(result.state.action_history) == 1

    def test_agents_observe_new_state(self):
        """Seated agents see every new state."""
        service = _service()
        recorder = RecordingAgent("alpha")
        _start(service, agents=[recorder])
        result = asyncio.run(service.step("g"))
        assert recorder.seen == [result.state]

    def test_hand_end_is_reported(self):
        """The step that ends a hand says so."""
        service = _service()
        _start(service, agents=[FixedAgent("beta", Action.fold()), FixedAgent("gamma", Action.fold())])

        async def two_steps():
            await service.step("g")
            return await service.step("g")

        result = asyncio.run(two_steps())
        assert result.hand_ended
        assert result.state.hand_number == 2


class TestPlay:
    """Tests for running whole games."""

    def test_play_until_finished(self):
        """Random agents play a game without losing chips."""
        service = _service()
        agents = [RandomAgent(m, rng=random.Random(i)) for i, m in enumerate(MODELS)]
        service.start_game(
            GameMode.FAST,
            GameSettings(models=MODELS, win_threshold=0.6),
            agents=agents,
            game_id="g",
        )
        state = asyncio.run(service.play("g", max_actions=3000))
        discarded = sum(r.pot - r.amount_each * len(r.winners) for r in state.hand_results)
        assert state.total_chips + discarded == 3000
        if state.is_finished:
            assert state.winner is not None

    def test_step_after_finish(self):
        """A finished game cannot be stepped."""
        service = _service()
        service.start_game(GameMode.SMART, GameSettings(models=("alpha", "beta")), game_id="h")
        # Fallback agents bet whenever nothing is owed, so the first
        # uneven showdown hands someone the majority
        state = asyncio.run(service.play("h", max_actions=500))
        assert state.is_finished
        with pytest.raises(GameOver):
            asyncio.run(service.step("h"))

    def test_unknown_game(self):
        """Stepping an unknown game raises GameNotFound."""
        with pytest.raises(GameNotFound):
            asyncio.run(_service().step("nope"))


class TestSerialization:
    """Concurrent steps on one game are applied one after another."""

    def test_concurrent_steps(self):
        """Two steps at once are applied one after another."""
        service = _service()
        _start(service, agents=[CallAgent(m) for m in MODELS])

        async def race():
            return await asyncio.gather(service.step("g"), service.step("g"))

        first, second = asyncio.run(race())
        state = service.repository.get("g")
        assert len(state.action_history) == 2
        assert [log.model for log in state.action_history] == ["beta", "gamma"]
        assert second.state is state
        assert state.total_chips == 3000


class TestEndGame:
    """Removing games frees everything held for them."""

    def test_end_game(self):
        """Ending a game drops its state, lock and agents."""
        service = _service()
        recorder = RecordingAgent("alpha")
        _start(service, agents=[recorder])
        asyncio.run(service.step("g"))

        service.end_game("g")
        assert "g" not in service.repository
        assert service.repository._locks == {}
        assert "g" not in service._agents
        assert recorder.was_reset
        with pytest.raises(GameNotFound):
            asyncio.run(service.step("g"))

    def test_unknown_games_leave_nothing_behind(self):
        """Failed lookups do not create locks or agent tables."""
        service = _service()
        for i in range(20):
            with pytest.raises(GameNotFound):
                asyncio.run(service.step(f"missing-{i}"))
        assert service.repository._locks == {}
        assert service._agents == {}
