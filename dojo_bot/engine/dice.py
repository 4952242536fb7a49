# engine/dice.py
# Pre-generates each player's roll sequence and the point where they win

import math
import random
import logging
from typing import Callable, List, Optional

from dojo_bot.config import (
    MAX_ROLL_VALUE, MAX_DAMAGE_VALUE, TOTAL_DICE_ROLLS, WINNING_SCORE,
    RESET_SCORE, DICE_RETRIES, TURNS_IN_ROUND, NPC_USER_ID
)
from dojo_bot.models import Asset, GameNPC, Player, RollData, RoundData, RoundsData

logger = logging.getLogger(__name__)


class NoWinningRollError(Exception):
    """Raised when a roll sequence never lands exactly on the winning score."""
    pass


def generate_dice_damage_map(max_dice_value: int = MAX_ROLL_VALUE,
                             max_damage_value: int = MAX_DAMAGE_VALUE) -> dict:
    """Map every face of the die to a damage value (1-2 -> 1, 3-4 -> 2, 5-6 -> 3)."""
    dice_per_damage = max_dice_value / max_damage_value
    return {
        face: math.ceil(face / dice_per_damage)
        for face in range(1, max_dice_value + 1)
    }


DICE_DAMAGE = generate_dice_damage_map()


def dice_rolls(count: int) -> List[int]:
    return [random.randint(1, MAX_ROLL_VALUE) for _ in range(count)]


def damage_for_roll(roll: int) -> int:
    return DICE_DAMAGE.get(roll, 0)


def damage_calc(rolls: List[int]) -> RoundsData:
    """
    Turn raw dice rolls into rounds of damage.

    The running total resets to RESET_SCORE whenever it overshoots
    WINNING_SCORE. The sequence stops at the first roll that lands exactly
    on WINNING_SCORE.

    Args:
        rolls: Raw dice values

    Returns:
        RoundsData with the win indices set

    Raises:
        NoWinningRollError: if no roll reaches the winning score
    """
    rounds: List[RoundData] = []
    round_rolls: List[RollData] = []
    total_score = 0
    round_index = 0
    roll_index = 0

    for roll in rolls:
        damage = damage_for_roll(roll)
        total_score += damage
        if total_score > WINNING_SCORE:
            total_score = RESET_SCORE
        round_rolls.append(RollData(roll=roll, damage=damage, total_score=total_score))

        if total_score == WINNING_SCORE:
            rounds.append(RoundData(rolls=round_rolls))
            return RoundsData(
                rounds=rounds,
                game_win_round_index=round_index,
                game_win_roll_index=roll_index,
            )

        if roll_index == TURNS_IN_ROUND - 1:
            rounds.append(RoundData(rolls=round_rolls))
            round_rolls = []
            round_index += 1
            roll_index = 0
        else:
            roll_index += 1

    raise NoWinningRollError('No winning roll found')


def complete_game_for_player(
    dice_function: Optional[Callable[[int], List[int]]] = None,
    damage_function: Callable[[List[int]], RoundsData] = damage_calc,
) -> RoundsData:
    """
    Generate a complete roll sequence for one player.

    Retries a few times when the dice never land on the winning score.
    """
    dice_function = dice_function or dice_rolls
    for attempt in range(DICE_RETRIES):
        try:
            return damage_function(dice_function(TOTAL_DICE_ROLLS))
        except NoWinningRollError:
            logger.info(f"No winning roll on attempt {attempt + 1}, rolling again")
    raise NoWinningRollError(f'No winning roll found after {DICE_RETRIES} tries')


def generate_npc_player(npc: GameNPC) -> Player:
    """Build the computer controlled opponent for an NPC game type."""
    asset = Asset(asset_id=npc.asset_id, name=npc.name, unit_name=npc.name,
                  owner_id=NPC_USER_ID)
    return Player(
        user_id=NPC_USER_ID,
        asset=asset,
        rounds_data=complete_game_for_player(),
        is_npc=True,
    )
