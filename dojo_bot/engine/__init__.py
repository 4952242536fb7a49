# Training game engine: state machine, winners, payouts, cooldowns and board

from .game_state import (
    GameState,
    GameStatus,
    GameStateError,
    InvalidTransitionError,
    NoPlayersError,
)
from .payout import karma_payout_calculator, active_payout_modifier
from .cooldown import (
    calculate_inc_and_dec,
    calculate_factor_chance_pct,
    calculate_time_pct,
    cool_down_rolls,
    factor_chance_pct,
    roll_for_cool_down,
)
from .board import RenderPhase, RENDER_PHASES, render_board
from .dice import (
    NoWinningRollError,
    complete_game_for_player,
    damage_calc,
    generate_npc_player,
)

__all__ = [
    # State machine
    'GameState',
    'GameStatus',
    'GameStateError',
    'InvalidTransitionError',
    'NoPlayersError',
    # Payout
    'karma_payout_calculator',
    'active_payout_modifier',
    # Cooldown
    'calculate_inc_and_dec',
    'calculate_factor_chance_pct',
    'calculate_time_pct',
    'cool_down_rolls',
    'factor_chance_pct',
    'roll_for_cool_down',
    # Board
    'RenderPhase',
    'RENDER_PHASES',
    'render_board',
    # Dice
    'NoWinningRollError',
    'complete_game_for_player',
    'damage_calc',
    'generate_npc_player',
]
