# engine/cooldown.py
# Adjusts an asset's post-game cooldown from how it compares to everyone else

import random
import logging
from typing import Callable, Optional, Tuple

from dojo_bot.config import (
    GAMES_MEDIAN_MAX, WALLET_MEDIAN_MAX, RANK_MEDIAN_MAX,
    TIME_MAX_PERCENTS, BONUS_CHANCES
)
from dojo_bot.models import Asset, GameBonusData, IncreaseDecrease, MedianMaxes

logger = logging.getLogger(__name__)

GAMES_MAXES = MedianMaxes.from_dict(GAMES_MEDIAN_MAX)
WALLET_MAXES = MedianMaxes.from_dict(WALLET_MEDIAN_MAX)
RANK_MAXES = MedianMaxes.from_dict(RANK_MEDIAN_MAX)


def calculate_inc_and_dec(median_maxes: MedianMaxes, asset_stat: float,
                          average: float) -> IncreaseDecrease:
    """
    Work out the increase/decrease chance contributed by a single stat.

    The chance grows linearly with the distance between the stat and the
    population average and saturates at the configured maximum for the side
    of the average the stat is on.

    Args:
        median_maxes: Caps for stats above and below the average
        asset_stat: The asset's (or owner's) value for the stat
        average: Population average for the stat

    Returns:
        IncreaseDecrease chance pair
    """
    if average == 0:
        return IncreaseDecrease(0, 0)
    difference = abs(average - (asset_stat - 1))
    maxes = median_maxes.above_median_max if asset_stat > average else median_maxes.below_median_max
    increase = min(maxes.increase / average * difference, maxes.increase)
    decrease = min(maxes.decrease / average * difference, maxes.decrease)
    return IncreaseDecrease(increase, decrease)


def calculate_factor_chance_pct(bonus_stats: GameBonusData) -> IncreaseDecrease:
    """
    Combine games played, owned assets and rank into one chance pair.

    Playing more than average, owning more than average and ranking near the
    top all push toward a longer cooldown. New and small owners lean toward
    a shorter one.
    """
    game_factors = calculate_inc_and_dec(
        GAMES_MAXES, bonus_stats.asset_total_games, bonus_stats.average_total_games)
    wallet_factors = calculate_inc_and_dec(
        WALLET_MAXES, bonus_stats.user_total_assets, bonus_stats.average_total_assets)
    rank_factors = calculate_inc_and_dec(
        RANK_MAXES, bonus_stats.asset_rank, bonus_stats.average_rank)

    increase = (game_factors.increase + wallet_factors.increase + rank_factors.increase
                + BONUS_CHANCES['increase_base_chance'])
    decrease = (game_factors.decrease + wallet_factors.decrease + rank_factors.decrease
                + BONUS_CHANCES['decrease_base_chance'])
    return IncreaseDecrease(
        increase=min(increase, BONUS_CHANCES['increase_max_chance']),
        decrease=min(decrease, BONUS_CHANCES['decrease_max_chance']),
    )


def calculate_time_pct(factor_pct: IncreaseDecrease, channel_cool_down: float) -> IncreaseDecrease:
    """
    Convert a chance pair into the time added or removed from the cooldown.

    A chance at its maximum maps to the largest allowed change: 80% of the
    channel cooldown for an increase, the whole cooldown for a decrease.
    """
    increase_cap = channel_cool_down * TIME_MAX_PERCENTS['increase']
    decrease_cap = channel_cool_down * TIME_MAX_PERCENTS['decrease']
    increase = factor_pct.increase / BONUS_CHANCES['increase_max_chance'] * increase_cap
    decrease = factor_pct.decrease / BONUS_CHANCES['decrease_max_chance'] * decrease_cap
    return IncreaseDecrease(
        increase=min(increase_cap, increase),
        decrease=min(decrease_cap, decrease),
    )


def cool_down_rolls(random_function: Callable[[], float] = random.random) -> Tuple[float, float]:
    """Two independent uniform rolls: (increase_roll, decrease_roll)."""
    return random_function(), random_function()


def factor_chance_pct(asset: Asset, user_id: int) -> IncreaseDecrease:
    """Look up the asset's bonus data and turn it into a chance pair."""
    from dojo_bot import database as db
    user_total_assets = db.get_total_assets_by_user(user_id)
    bonus_stats = db.get_bonus_data(asset, user_total_assets)
    return calculate_factor_chance_pct(bonus_stats)


def roll_for_cool_down(
    asset: Asset,
    user_id: int,
    channel_cool_down: float,
    rolls_function: Optional[Callable[[], Tuple[float, float]]] = None,
    factor_function: Optional[Callable[[Asset, int], IncreaseDecrease]] = None,
) -> float:
    """
    Roll the cooldown an asset has to wait after a match.

    Args:
        asset: Asset that just played
        user_id: Owner of the asset
        channel_cool_down: Base cooldown of the channel in seconds
        rolls_function: Source of the two uniform rolls
        factor_function: Source of the increase/decrease chances

    Returns:
        Cooldown in seconds
    """
    rolls_function = rolls_function or cool_down_rolls
    factor_function = factor_function or factor_chance_pct

    chances = factor_function(asset, user_id)
    times = calculate_time_pct(chances, channel_cool_down)
    increase_roll, decrease_roll = rolls_function()

    cool_down = channel_cool_down
    if increase_roll < chances.increase:
        cool_down += times.increase
    elif decrease_roll < chances.decrease:
        cool_down -= times.decrease

    if cool_down != channel_cool_down:
        logger.info(f"Cooldown for asset {asset.asset_id} rolled to {cool_down:.0f}s "
                    f"(base {channel_cool_down}s)")
    return cool_down
