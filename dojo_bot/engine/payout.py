# engine/payout.py
# Karma payout rules and the temporary karma boost

from datetime import datetime
from typing import Any, Dict, Optional

from dojo_bot.models import TokenSettings

BASE_ROUNDS = 5


def karma_payout_calculator(winning_round: int, token_settings: TokenSettings,
                            zen: bool, bonus_multiplier: Optional[float] = 1) -> float:
    """
    Calculate the karma paid to each winner of a match.

    Rounds 1-5 pay the base amount. Every round after that adds the round
    modifier to the base and, for a zen finish, the zen round modifier to the
    zen multiplier.

    Args:
        winning_round: Winning round number (1-based, not the index)
        token_settings: Economy constants of the channel
        zen: Whether more than one player won on the same roll
        bonus_multiplier: Extra multiplier such as an active karma boost

    Returns:
        Payout amount
    """
    if bonus_multiplier is None:
        bonus_multiplier = 1
    extra_rounds = max(0, winning_round - BASE_ROUNDS)
    base = token_settings.base_amount + token_settings.round_modifier * extra_rounds
    if zen:
        multiplier = token_settings.zen_multiplier + token_settings.zen_round_modifier * extra_rounds
    else:
        multiplier = 1
    return base * multiplier * bonus_multiplier


def active_payout_modifier(boost: Optional[Dict[str, Any]],
                           now: Optional[datetime] = None) -> Optional[float]:
    """
    Return the karma boost modifier if the boost window is open.

    Args:
        boost: Dict with 'modifier', 'start' and 'expiry' (datetimes)
        now: Time to check against, defaults to the current time
    """
    if not boost:
        return None
    now = now or datetime.now()
    start = boost.get('start')
    expiry = boost.get('expiry')
    if start and expiry and start <= now < expiry:
        return boost.get('modifier')
    return None
