# engine/game_state.py
# Match state machine. Every transition returns a new GameState.

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from dojo_bot.config import TURNS_IN_ROUND
from dojo_bot.models import (
    GameNPC, GameRoundState, GameWinInfo, Player, PlayerManager, TokenSettings
)
from dojo_bot.engine.board import RenderPhase, render_board
from dojo_bot.engine.dice import generate_npc_player
from dojo_bot.engine.payout import karma_payout_calculator

logger = logging.getLogger(__name__)


class GameStatus(str, Enum):
    WAITING_ROOM = 'waitingRoom'
    ACTIVE_GAME = 'activeGame'
    WIN = 'win'
    FINISHED = 'finished'
    MAINTENANCE = 'maintenance'


class GameStateError(Exception):
    """Base error for the training game engine."""
    pass


class InvalidTransitionError(GameStateError):
    """Raised when a transition is not allowed from the current status."""
    pass


class NoPlayersError(GameStateError):
    """Raised when winners are resolved for a match without players."""
    pass


@dataclass(frozen=True)
class GameState:
    """
    State of one training match.

    The state is never changed in place: transitions build and return a new
    instance, leaving the original untouched (also when they raise).
    """

    token: TokenSettings
    npc: Optional[GameNPC] = None
    status: GameStatus = GameStatus.WAITING_ROOM
    game_round_state: GameRoundState = field(default_factory=GameRoundState)
    game_win_info: GameWinInfo = field(default_factory=GameWinInfo)
    player_manager: Optional[PlayerManager] = None
    encounter_id: Optional[int] = None

    def __post_init__(self):
        if self.player_manager is None:
            npc_player = generate_npc_player(self.npc) if self.npc else None
            object.__setattr__(self, 'player_manager', PlayerManager(npc_player))

    def _evolve(self, **changes) -> 'GameState':
        if 'player_manager' not in changes:
            changes['player_manager'] = self.player_manager.copy()
        return replace(self, **changes)

    # ==================== STATUS ====================

    def reset(self) -> 'GameState':
        """Fresh waiting room with the same economy (and a new NPC roll sequence)."""
        return GameState(self.token, self.npc)

    def update_status(self, new_status: GameStatus) -> 'GameState':
        return self._evolve(status=new_status)

    def set_current_player(self, player: Player, player_index: int) -> 'GameState':
        round_state = replace(self.game_round_state,
                              current_player=player, player_index=player_index)
        return self._evolve(game_round_state=round_state)

    def can_start_game(self, min_players: int) -> bool:
        return (self.status == GameStatus.WAITING_ROOM
                and self.player_manager.count() >= min_players)

    def start_game(self, min_players: int = 1, encounter_id: Optional[int] = None) -> 'GameState':
        if not self.can_start_game(min_players):
            raise InvalidTransitionError("Can't start the game from the current state")
        return self._evolve(status=GameStatus.ACTIVE_GAME, encounter_id=encounter_id)

    def finish_game(self) -> 'GameState':
        if self.status != GameStatus.WIN:
            raise InvalidTransitionError("Can't finish the game from the current state")
        return self.update_status(GameStatus.FINISHED)

    def maintenance(self) -> 'GameState':
        if self.status not in (GameStatus.WAITING_ROOM, GameStatus.FINISHED):
            raise InvalidTransitionError("Can't set the game to maintenance from the current state")
        return self.update_status(GameStatus.MAINTENANCE)

    # ==================== PLAYERS ====================

    def add_player(self, player: Player) -> 'GameState':
        """Seat a player, replacing the entry of an already registered user."""
        manager = self.player_manager.copy()
        manager.add_player(player)
        return self._evolve(player_manager=manager)

    def remove_player(self, user_id: int) -> 'GameState':
        manager = self.player_manager.copy()
        manager.remove_player(user_id)
        return self._evolve(player_manager=manager)

    # ==================== ROLLS ====================

    def next_roll(self) -> 'GameState':
        """
        Advance the cursor by one roll, wrapping into the next round.

        Once the match is won further calls leave the state as it is.
        """
        if self.status == GameStatus.FINISHED:
            raise InvalidTransitionError("Can't roll in a finished game")
        if self.status == GameStatus.WIN:
            return self

        state = self.next_round() if self.should_increment_round() else self.increment_roll()
        if state.check_for_win():
            return state.update_status(GameStatus.WIN)
        return state

    def should_increment_round(self) -> bool:
        return self.game_round_state.roll_index + 1 >= TURNS_IN_ROUND

    def increment_roll(self) -> 'GameState':
        round_state = replace(self.game_round_state,
                              roll_index=self.game_round_state.roll_index + 1)
        return self._evolve(game_round_state=round_state)

    def next_round(self) -> 'GameState':
        round_state = replace(self.game_round_state,
                              round_index=self.game_round_state.round_index + 1,
                              roll_index=0)
        return self._evolve(game_round_state=round_state)

    def check_for_win(self) -> bool:
        if self.status == GameStatus.WIN:
            return True
        cursor = (self.game_round_state.round_index, self.game_round_state.roll_index)
        win_point = (self.game_win_info.game_win_round_index,
                     self.game_win_info.game_win_roll_index)
        return cursor == win_point

    # ==================== WINNERS ====================

    def find_zen_and_winners(self, token: Optional[TokenSettings] = None,
                             bonus_multiplier: Optional[float] = None) -> 'GameState':
        """
        Resolve the winners, zen flag and payout of the match.

        The match ends on the earliest (round, roll) at which any player
        reaches the winning score. Every player whose sequence wins on that
        exact roll is a winner; more than one winner is a zen.

        Args:
            token: Economy to pay out with, defaults to the state's own
            bonus_multiplier: Extra payout multiplier (karma boost)

        Raises:
            NoPlayersError: if nobody is registered
        """
        token = token or self.token
        players = self.player_manager.get_all_players()
        if not players:
            raise NoPlayersError("Can't find zen and winners with no players")

        win_round, win_roll = min(player.rounds_data.win_point for player in players)
        winners = [replace(player, is_winner=player.rounds_data.win_point == (win_round, win_roll))
                   for player in players]
        zen = sum(1 for player in winners if player.is_winner) > 1

        payout = karma_payout_calculator(win_round + 1, token, zen, bonus_multiplier)
        win_info = GameWinInfo(
            game_win_round_index=win_round,
            game_win_roll_index=win_roll,
            zen=zen,
            payout=payout,
        )
        logger.info(f"Match resolved: round {win_round + 1} roll {win_roll + 1}, "
                    f"zen={zen}, payout={payout}")
        return self._evolve(game_win_info=win_info, player_manager=PlayerManager(players=winners))

    # ==================== RENDER ====================

    def render_this_board(self, render_phase: RenderPhase) -> str:
        return render_board(
            self.game_round_state.roll_index,
            self.game_round_state.round_index,
            self.game_round_state.player_index,
            self.player_manager.get_all_players(),
            render_phase,
        )
