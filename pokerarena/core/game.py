"""
Texas Hold'em Game Engine - State Machine Implementation.

This module implements the core game logic for the arena. It handles:
- Game creation with a fixed roster of seats
- Dealer button and blind rotation, blind escalation
- Applying one validated action at a time (fold, check, call, raise, all-in)
- Street advancement (preflop, flop, turn, river) and showdown settlement
- Elimination and majority-winner termination

`GameState` is an immutable snapshot. Every transition returns a new state
and never alters its input, so a caller only has to serialize calls per game.

Usage:
    state = start_new_hand(create_game(GameMode.FAST, "game-1"))

    while not state.is_finished:
        player = state.current_player
        action = decide(state, player)  # From an agent
        state, log = apply_action(state, action, player.model, response_time_ms=120)
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple
import logging
import random
import time

from pokerarena.core.actions import Action, ActionType, is_legal
from pokerarena.core.card import Card, deck_without, new_shuffled_deck
from pokerarena.core.errors import GameOver, IllegalAction, ReasoningAlreadySet, WrongPlayer
from pokerarena.core.hand import HandRank, compare, evaluate
from pokerarena.core.player import Player
from pokerarena.core.rules import (
    GameMode, GamePhase,
    CARDS_FOR_NEXT_STREET, DEFAULT_ACTION_TIMEOUT_MS, DEFAULT_BIG_BLIND,
    DEFAULT_BLIND_ESCALATION_HANDS, DEFAULT_MODELS, DEFAULT_SMALL_BLIND,
    DEFAULT_STARTING_CHIPS, DEFAULT_WIN_THRESHOLD, HOLE_CARDS, MAX_PLAYERS,
    MIN_PLAYERS, TOTAL_COMMUNITY_CARDS,
    blinds_for_hand, model_name_for, next_phase,
)


logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class GameSettings:
    """
    Configuration supplied at game creation.

    Attributes:
        small_blind: Base small blind
        big_blind: Base big blind
        starting_chips: Stack each seat starts with
        action_timeout_ms: Time budget for an external decision maker
            (None means the mode default)
        win_threshold: Share of all chips that ends the game for a unique leader
        models: Agent identifiers, one per seat, in seating order
        blind_escalation_hands: Double the blinds every N hands; None means
            the mode default, 0 disables escalation
    """
    small_blind: int = DEFAULT_SMALL_BLIND
    big_blind: int = DEFAULT_BIG_BLIND
    starting_chips: int = DEFAULT_STARTING_CHIPS
    action_timeout_ms: Optional[int] = None
    win_threshold: float = DEFAULT_WIN_THRESHOLD
    models: Tuple[str, ...] = DEFAULT_MODELS
    blind_escalation_hands: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "models", tuple(self.models))
        if self.small_blind <= 0 or self.big_blind <= 0:
            raise ValueError("Blinds must be positive")
        if self.small_blind > self.big_blind:
            raise ValueError("Small blind cannot exceed big blind")
        if self.starting_chips <= 0:
            raise ValueError("Starting chips must be positive")
        if not 0 < self.win_threshold <= 1:
            raise ValueError(f"win_threshold must be in (0, 1], got {self.win_threshold}")
        if self.action_timeout_ms is not None and self.action_timeout_ms <= 0:
            raise ValueError("action_timeout_ms must be positive")
        if self.blind_escalation_hands is not None and self.blind_escalation_hands < 0:
            raise ValueError("blind_escalation_hands cannot be negative")
        if not MIN_PLAYERS <= len(self.models) <= MAX_PLAYERS:
            raise ValueError(f"Number of players must be {MIN_PLAYERS}-{MAX_PLAYERS}")
        if len(set(self.models)) != len(self.models):
            raise ValueError("Model identifiers must be unique")

    def timeout_for(self, mode: GameMode) -> int:
        if self.action_timeout_ms is not None:
            return self.action_timeout_ms
        return DEFAULT_ACTION_TIMEOUT_MS[GameMode(mode)]

    def escalation_for(self, mode: GameMode) -> Optional[int]:
        if self.blind_escalation_hands is not None:
            return self.blind_escalation_hands or None
        return DEFAULT_BLIND_ESCALATION_HANDS[GameMode(mode)]


@dataclass(frozen=True)
class ActionSnapshot:
    """Table state just before an action was applied."""
    pot: int
    current_bet: int
    community_cards: Tuple[Card, ...]
    player_chips: Mapping[str, int]
    player_bets: Mapping[str, int]

    def __post_init__(self):
        # Read-only views so a logged entry cannot be rewritten later
        object.__setattr__(self, "community_cards", tuple(self.community_cards))
        object.__setattr__(self, "player_chips", MappingProxyType(dict(self.player_chips)))
        object.__setattr__(self, "player_bets", MappingProxyType(dict(self.player_bets)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pot": self.pot,
            "current_bet": self.current_bet,
            "community_cards": [c.to_dict() for c in self.community_cards],
            "player_chips": dict(self.player_chips),
            "player_bets": dict(self.player_bets),
        }


@dataclass(frozen=True)
class ActionLog:
    """
    Audit record of one applied action.

    Only `reasoning` may be filled in later, exactly once, through
    `with_reasoning`.
    """
    hand_number: int
    phase: GamePhase
    model: str
    action: ActionType
    amount: Optional[int]
    response_time_ms: int
    snapshot: ActionSnapshot
    timestamp: int
    reasoning: Optional[str] = None

    def with_reasoning(self, reasoning: str) -> ActionLog:
        """
        Return a copy carrying `reasoning`.

        Raises:
            ReasoningAlreadySet: If this entry already has reasoning
        """
        if self.reasoning is not None:
            raise ReasoningAlreadySet(
                f"Reasoning already attached to {self.model}'s action in hand {self.hand_number}"
            )
        return replace(self, reasoning=reasoning)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hand_number": self.hand_number,
            "phase": self.phase.value,
            "model": self.model,
            "action": self.action.value,
            "amount": self.amount,
            "response_time_ms": self.response_time_ms,
            "snapshot": self.snapshot.to_dict(),
            "timestamp": self.timestamp,
            "reasoning": self.reasoning,
        }


@dataclass(frozen=True)
class HandResult:
    """How a hand's pot was settled."""
    hand_number: int
    winners: Tuple[str, ...]
    pot: int
    amount_each: int
    showdown: bool
    hands: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "hands", MappingProxyType(dict(self.hands)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hand_number": self.hand_number,
            "winners": list(self.winners),
            "pot": self.pot,
            "amount_each": self.amount_each,
            "showdown": self.showdown,
            "hands": dict(self.hands),
        }


@dataclass(frozen=True)
class GameState:
    """
    Complete, immutable state of one game.

    Seats in `players` never change order. `action_history` and
    `hand_results` are append-only.
    """
    id: str
    mode: GameMode
    players: Tuple[Player, ...]
    settings: GameSettings
    community_cards: Tuple[Card, ...] = ()
    pot: int = 0
    current_bet: int = 0
    dealer_index: int = 0
    small_blind_index: int = 1
    big_blind_index: int = 2
    current_player_index: int = 3
    phase: GamePhase = GamePhase.PREFLOP
    hand_number: int = 0
    small_blind: int = DEFAULT_SMALL_BLIND
    big_blind: int = DEFAULT_BIG_BLIND
    action_timeout_ms: int = DEFAULT_ACTION_TIMEOUT_MS[GameMode.FAST]
    win_threshold: float = DEFAULT_WIN_THRESHOLD
    action_history: Tuple[ActionLog, ...] = ()
    hand_results: Tuple[HandResult, ...] = ()
    mucked_cards: Tuple[Card, ...] = ()
    started_at: int = 0

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def current_player(self) -> Optional[Player]:
        """The player whose turn it is to act."""
        if self.is_finished:
            return None
        return self.players[self.current_player_index]

    @property
    def is_finished(self) -> bool:
        return self.phase == GamePhase.FINISHED

    @property
    def total_chips(self) -> int:
        """All chips on the table, stacks plus pot."""
        return sum(p.chips for p in self.players) + self.pot

    @property
    def leader(self) -> Player:
        """The first seat holding the most chips."""
        return max(self.players, key=lambda p: p.chips)

    @property
    def winner(self) -> Optional[Player]:
        """The game winner once finished."""
        if not self.is_finished:
            return None
        return get_majority_winner(self.players, self.pot, self.win_threshold) or self.leader

    @property
    def in_play_cards(self) -> List[Card]:
        """Every live card: hole cards plus community cards."""
        cards = [card for p in self.players if p.hole_cards for card in p.hole_cards]
        return cards + list(self.community_cards)

    @property
    def dealt_cards(self) -> List[Card]:
        """Every card dealt this hand, including folded and busted hands."""
        return self.in_play_cards + list(self.mucked_cards)

    def player_by_model(self, model: str) -> Optional[Player]:
        for player in self.players:
            if player.model == model:
                return player
        return None

    def to_dict(self, reveal_cards: bool = False) -> Dict[str, Any]:
        """
        Convert to a JSON-ready dictionary.

        Args:
            reveal_cards: Include every player's hole cards
        """
        current = self.current_player
        return {
            "id": self.id,
            "mode": self.mode.value,
            "phase": self.phase.value,
            "hand_number": self.hand_number,
            "pot": self.pot,
            "current_bet": self.current_bet,
            "community_cards": [c.to_dict() for c in self.community_cards],
            "dealer_index": self.dealer_index,
            "small_blind_index": self.small_blind_index,
            "big_blind_index": self.big_blind_index,
            "current_player_index": self.current_player_index,
            "current_player": current.model if current else None,
            "small_blind": self.small_blind,
            "big_blind": self.big_blind,
            "action_timeout_ms": self.action_timeout_ms,
            "win_threshold": self.win_threshold,
            "players": [
                {**p.to_dict(hide_cards=not reveal_cards), "model_name": model_name_for(self.mode, p.model)}
                for p in self.players
            ],
            "action_history": [log.to_dict() for log in self.action_history],
            "hand_results": [r.to_dict() for r in self.hand_results],
            "started_at": self.started_at,
        }


def create_game(
    mode: GameMode,
    game_id: str,
    settings: Optional[GameSettings] = None,
) -> GameState:
    """
    Seat a fresh game. No cards are dealt; call `start_new_hand` next.

    Args:
        mode: Arena mode (affects timeouts and blind escalation)
        game_id: Identifier of the game
        settings: Game configuration, defaults if omitted
    """
    mode = GameMode(mode)
    settings = settings or GameSettings()
    num_players = len(settings.models)

    players = tuple(
        Player(player_id=f"player-{i}", model=model, chips=settings.starting_chips)
        for i, model in enumerate(settings.models)
    )

    logger.info(f"Created {mode.value} game {game_id} with {num_players} players")

    return GameState(
        id=game_id,
        mode=mode,
        players=players,
        settings=settings,
        dealer_index=0,
        small_blind_index=1 % num_players,
        big_blind_index=2 % num_players,
        current_player_index=3 % num_players,
        phase=GamePhase.PREFLOP,
        hand_number=0,
        small_blind=settings.small_blind,
        big_blind=settings.big_blind,
        action_timeout_ms=settings.timeout_for(mode),
        win_threshold=settings.win_threshold,
        started_at=_now_ms(),
    )


def get_majority_winner(
    players: Sequence[Player],
    pot: int,
    threshold: float,
) -> Optional[Player]:
    """
    The unique chip leader holding at least `threshold` of all chips.

    Returns:
        The leading player, or None if the lead is shared or too small
    """
    total = sum(p.chips for p in players) + pot
    if total <= 0 or not players:
        return None

    ordered = sorted(players, key=lambda p: p.chips, reverse=True)
    leader = ordered[0]
    if len(ordered) > 1 and ordered[1].chips == leader.chips:
        return None
    if leader.chips >= threshold * total:
        return leader
    return None


def _seat_after(
    players: Sequence[Player],
    start: int,
    predicate: Callable[[Player], bool],
    inclusive: bool = False,
) -> Optional[int]:
    """First seat after `start` (wrapping) whose player matches `predicate`."""
    n = len(players)
    offsets = range(0, n) if inclusive else range(1, n + 1)
    for offset in offsets:
        index = (start + offset) % n
        if predicate(players[index]):
            return index
    return None


def _has_chips(player: Player) -> bool:
    return player.is_active and player.chips > 0


def start_new_hand(state: GameState, rng: Optional[random.Random] = None) -> GameState:
    """
    Reset the table and deal the next hand.

    Ends the game instead (phase FINISHED) when a unique leader holds at
    least `win_threshold` of all chips or fewer than two players have chips.

    Args:
        state: State after the previous hand was settled
        rng: Random source for shuffling

    Raises:
        ValueError: If the previous pot has not been paid out
    """
    if state.pot:
        raise ValueError(
            f"Cannot deal hand #{state.hand_number + 1} of game {state.id} with {state.pot} chips still in the pot"
        )

    players = [p.reset_for_new_hand() for p in state.players]
    finished = replace(
        state,
        players=tuple(players),
        community_cards=(),
        mucked_cards=(),
        current_bet=0,
        phase=GamePhase.FINISHED,
    )

    majority = get_majority_winner(players, state.pot, state.win_threshold)
    if majority is not None:
        logger.info(f"Game {state.id} finished: {majority.model} holds a majority of chips")
        return finished

    seated = [i for i, p in enumerate(players) if _has_chips(p)]
    if len(seated) < 2:
        logger.info(f"Game {state.id} finished: fewer than 2 players with chips")
        return finished

    hand_number = state.hand_number + 1
    escalation = state.settings.escalation_for(state.mode)
    small_blind, big_blind = blinds_for_hand(
        hand_number, state.settings.small_blind, state.settings.big_blind, escalation
    )
    if big_blind != state.big_blind:
        logger.info(f"Blinds raised to {small_blind}/{big_blind} for hand #{hand_number}")

    dealer = _seat_after(players, state.dealer_index, _has_chips)
    sb_index = _seat_after(players, dealer, _has_chips)
    bb_index = _seat_after(players, sb_index, _has_chips)

    deck = new_shuffled_deck(rng)
    for i in seated:
        players[i] = players[i].deal_cards(tuple(deck.deal_many(HOLE_CARDS)))

    sb_amount = min(small_blind, players[sb_index].chips)
    players[sb_index] = players[sb_index].bet(sb_amount)
    bb_amount = min(big_blind, players[bb_index].chips)
    players[bb_index] = players[bb_index].bet(bb_amount)

    logger.info(f"Starting hand #{hand_number} of game {state.id}")
    logger.debug(f"Blinds posted: SB={sb_amount} BB={bb_amount}")

    first_to_act = _seat_after(players, bb_index, lambda p: p.can_act)

    new_state = replace(
        state,
        players=tuple(players),
        community_cards=(),
        mucked_cards=(),
        pot=sb_amount + bb_amount,
        current_bet=max(sb_amount, bb_amount),
        dealer_index=dealer,
        small_blind_index=sb_index,
        big_blind_index=bb_index,
        current_player_index=first_to_act if first_to_act is not None else bb_index,
        phase=GamePhase.PREFLOP,
        hand_number=hand_number,
        small_blind=small_blind,
        big_blind=big_blind,
    )

    if first_to_act is None:
        # Every seat went all-in posting blinds
        logger.debug(f"No player can act in hand #{hand_number}, running out the board")
        return _settle_showdown(new_state, rng)

    return new_state


def apply_action(
    state: GameState,
    action: Action,
    acting_model: str,
    response_time_ms: int,
    rng: Optional[random.Random] = None,
) -> Tuple[GameState, ActionLog]:
    """
    Apply one action for the current player.

    Args:
        state: Current game state
        action: A decided action
        acting_model: Model that claims to be acting
        response_time_ms: How long the decision took
        rng: Random source for dealing community cards

    Returns:
        Tuple of (new state, log entry appended to its history)

    Raises:
        GameOver: If the game has finished
        WrongPlayer: If `acting_model` is not the current player
        IllegalAction: If the action fails `is_legal`
    """
    if state.is_finished:
        raise GameOver(f"Game {state.id} is finished")

    index = state.current_player_index
    player = state.players[index]
    if player.model != acting_model:
        raise WrongPlayer(player.model, acting_model)
    if not is_legal(action, player, state):
        raise IllegalAction(action, f"to call {state.current_bet - player.current_bet}, chips {player.chips}")

    players = list(state.players)
    pot = state.pot
    current_bet = state.current_bet
    amount = action.amount

    if action.type == ActionType.FOLD:
        players[index] = player.fold()
    elif action.type == ActionType.CHECK:
        pass
    else:
        if action.type == ActionType.ALL_IN:
            amount = player.chips
        players[index] = player.bet(amount)
        pot += amount
        current_bet = max(current_bet, players[index].current_bet)

    log = ActionLog(
        hand_number=state.hand_number,
        phase=state.phase,
        model=player.model,
        action=action.type,
        amount=amount,
        response_time_ms=response_time_ms,
        snapshot=ActionSnapshot(
            pot=state.pot,
            current_bet=state.current_bet,
            community_cards=state.community_cards,
            player_chips={p.model: p.chips for p in state.players},
            player_bets={p.model: p.current_bet for p in state.players},
        ),
        timestamp=_now_ms(),
    )
    logger.debug(f"Hand #{state.hand_number} {state.phase.value}: {player.model} {action}")

    # Anyone left without chips is out of the hand and the game
    players = [p.bust() if p.is_active and p.chips == 0 else p for p in players]
    mucked = tuple(
        card
        for before, after in zip(state.players, players)
        if before.hole_cards and not after.hole_cards
        for card in before.hole_cards
    )

    new_state = replace(
        state,
        players=tuple(players),
        pot=pot,
        current_bet=current_bet,
        action_history=state.action_history + (log,),
        mucked_cards=state.mucked_cards + mucked,
    )

    contenders = [i for i, p in enumerate(players) if p.can_act]
    if len(contenders) <= 1:
        return _settle_elimination(new_state, contenders, index, rng), log

    if _is_betting_round_complete(new_state):
        return _end_betting_round(new_state, rng), log

    next_index = _seat_after(
        players,
        index,
        lambda p: p.can_act and (p.current_bet != current_bet or p.is_all_in),
    )
    return replace(new_state, current_player_index=next_index), log


def _is_betting_round_complete(state: GameState) -> bool:
    """Every active player who is not all-in has matched the current bet."""
    return all(
        p.current_bet == state.current_bet
        for p in state.players
        if p.is_active and not p.is_all_in
    )


def _end_betting_round(state: GameState, rng: Optional[random.Random]) -> GameState:
    """Close the betting round: deal the next street or go to showdown."""
    if state.phase == GamePhase.RIVER:
        return _settle_showdown(state, rng)

    count = CARDS_FOR_NEXT_STREET[state.phase]
    deck = deck_without(state.dealt_cards, rng)
    community = state.community_cards + tuple(deck.deal_many(count))
    players = [p.reset_for_new_round() for p in state.players]

    first_to_act = _seat_after(players, state.small_blind_index, lambda p: p.can_act, inclusive=True)
    phase = next_phase(state.phase)
    logger.debug(f"Hand #{state.hand_number} {phase.value}: {' '.join(str(c) for c in community)}")

    return replace(
        state,
        players=tuple(players),
        community_cards=community,
        current_bet=0,
        current_player_index=first_to_act,
        phase=phase,
    )


def determine_winners(
    players: Sequence[Player],
    community_cards: Sequence[Card],
) -> Tuple[List[int], Dict[str, HandRank]]:
    """
    Find the best hands among players still holding cards.

    Returns:
        Tuple of (winning seat indices, hand rank per contesting model)
    """
    ranks: Dict[int, HandRank] = {
        i: evaluate(list(p.hole_cards) + list(community_cards))
        for i, p in enumerate(players)
        if p.has_live_hand
    }
    if not ranks:
        return [], {}

    best = max(ranks.values())
    winners = [i for i, rank in ranks.items() if compare(rank, best) == 0]
    return winners, {players[i].model: rank for i, rank in ranks.items()}


def _settle_showdown(state: GameState, rng: Optional[random.Random]) -> GameState:
    """
    Show down the remaining hands, split the pot and start the next hand.

    The pot is divided evenly among the best hands; chips left over by the
    integer division are not paid out.
    """
    community = state.community_cards
    missing = TOTAL_COMMUNITY_CARDS - len(community)
    if missing > 0:
        deck = deck_without(state.dealt_cards, rng)
        community = community + tuple(deck.deal_many(missing))

    players = list(state.players)
    winners, ranks = determine_winners(players, community)

    share = state.pot // len(winners) if winners else 0
    remainder = state.pot - share * len(winners)
    for i in winners:
        players[i] = players[i].win(share)
    if remainder:
        logger.warning(
            f"Hand #{state.hand_number}: {remainder} chip(s) not paid out "
            f"after splitting {state.pot} among {len(winners)} winners"
        )

    result = HandResult(
        hand_number=state.hand_number,
        winners=tuple(players[i].model for i in winners),
        pot=state.pot,
        amount_each=share,
        showdown=True,
        hands={model: rank.describe() for model, rank in ranks.items()},
    )
    logger.info(
        f"Hand #{state.hand_number} showdown: {', '.join(result.winners)} "
        f"win {share} each from a pot of {state.pot}"
    )

    settled = replace(
        state,
        players=tuple(players),
        community_cards=community,
        pot=0,
        current_bet=0,
        phase=GamePhase.SHOWDOWN,
        hand_results=state.hand_results + (result,),
    )
    return start_new_hand(settled, rng)


def _settle_elimination(
    state: GameState,
    contenders: List[int],
    acting_index: int,
    rng: Optional[random.Random],
) -> GameState:
    """Give the whole pot to the last player standing and start the next hand."""
    if contenders:
        winner = contenders[0]
    else:
        holders = [i for i, p in enumerate(state.players) if p.chips > 0]
        winner = holders[0] if holders else acting_index

    players = list(state.players)
    players[winner] = players[winner].win(state.pot)

    result = HandResult(
        hand_number=state.hand_number,
        winners=(players[winner].model,),
        pot=state.pot,
        amount_each=state.pot,
        showdown=False,
    )
    logger.info(f"Hand #{state.hand_number}: {players[winner].model} wins {state.pot} uncontested")

    settled = replace(
        state,
        players=tuple(players),
        pot=0,
        current_bet=0,
        phase=GamePhase.FINISHED,
        hand_results=state.hand_results + (result,),
    )
    return start_new_hand(settled, rng)


def attach_reasoning(state: GameState, action_index: int, reasoning: str) -> GameState:
    """
    Attach a rationale to one entry of the action history.

    Raises:
        IndexError: If there is no entry at `action_index`
        ReasoningAlreadySet: If that entry already has reasoning
    """
    if not 0 <= action_index < len(state.action_history):
        raise IndexError(f"No action at index {action_index}")
    history = list(state.action_history)
    history[action_index] = history[action_index].with_reasoning(reasoning)
    return replace(state, action_history=tuple(history))


@dataclass(frozen=True)
class HandLog:
    """Replay record of one hand."""
    hand_number: int
    community_cards: Tuple[Card, ...]
    actions: Tuple[ActionLog, ...]
    winners: Tuple[str, ...]
    pot_size: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hand_number": self.hand_number,
            "community_cards": [c.to_dict() for c in self.community_cards],
            "actions": [a.to_dict() for a in self.actions],
            "winners": list(self.winners),
            "pot_size": self.pot_size,
        }


@dataclass(frozen=True)
class GameLog:
    """Replay record of a whole game."""
    game_id: str
    mode: GameMode
    started_at: int
    hands: Tuple[HandLog, ...]
    final_rankings: Tuple[Dict[str, Any], ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "game_id": self.game_id,
            "mode": self.mode.value,
            "started_at": self.started_at,
            "hands": [h.to_dict() for h in self.hands],
            "final_rankings": [dict(r) for r in self.final_rankings],
        }


def build_game_log(state: GameState) -> GameLog:
    """Group the action history by hand and rank players by chips."""
    grouped: Dict[int, List[ActionLog]] = {}
    for log in state.action_history:
        grouped.setdefault(log.hand_number, []).append(log)

    results = {r.hand_number: r for r in state.hand_results}
    hands = []
    for hand_number, actions in grouped.items():
        result = results.get(hand_number)
        last = actions[-1].snapshot
        hands.append(HandLog(
            hand_number=hand_number,
            community_cards=last.community_cards,
            actions=tuple(actions),
            winners=result.winners if result else (),
            pot_size=result.pot if result else last.pot,
        ))

    ordered = sorted(state.players, key=lambda p: p.chips, reverse=True)
    rankings = tuple(
        {"model": p.model, "chips": p.chips, "rank": rank}
        for rank, p in enumerate(ordered, start=1)
    )

    return GameLog(
        game_id=state.id,
        mode=state.mode,
        started_at=state.started_at,
        hands=tuple(hands),
        final_rankings=rankings,
    )
