# utils/helpers.py
# Helper functions for channels, asset availability and message formatting

import logging
from datetime import datetime
from dataclasses import replace
from typing import Dict, List, Optional

from dojo_bot.config import GAME_TYPES
from dojo_bot.models import (
    Asset, ChannelSettings, GameNPC, GameStats, GameWinInfo, Player, TokenSettings
)
from dojo_bot.engine import GameState, roll_for_cool_down
import dojo_bot.database as db

logger = logging.getLogger(__name__)


def is_admin(user_id: int) -> bool:
    """Check if a user is an admin."""
    return user_id in db.admin_list


def get_user_link(user_id: int, name: str) -> str:
    """Generate an HTML user link for Telegram."""
    return f'<a href="tg://user?id={user_id}">{name}</a>'


def build_game_type(game_type: str, chat_id: int) -> ChannelSettings:
    """
    Build the channel settings for a training chat.

    Args:
        game_type: Key of GAME_TYPES
        chat_id: Telegram chat the game runs in

    Returns:
        ChannelSettings with the game type's capacities, cooldown and economy

    Raises:
        KeyError: if the game type is unknown
    """
    info = GAME_TYPES[game_type]
    npc = None
    if info['npc']:
        npc = GameNPC(name=info['npc']['name'], game_type=game_type,
                      asset_id=info['npc']['asset_id'])
    return ChannelSettings(
        chat_id=chat_id,
        game_type=game_type,
        min_capacity=info['min_capacity'],
        max_capacity=info['max_capacity'],
        cool_down=info['cool_down'],
        token=TokenSettings(**info['token']),
        npc=npc,
    )


# ==================== ASSET AVAILABILITY ====================

def is_asset_registered(asset_id: int, user_id: int, games: Optional[Dict] = None) -> bool:
    """Check whether the user has this asset entered in any channel game."""
    games = db.channel_games if games is None else games
    for game in games.values():
        player = game.player_manager.get_player(user_id)
        if player and player.asset.asset_id == asset_id:
            return True
    return False


def filter_available_assets(assets: List[Asset], user_id: int,
                            games: Optional[Dict] = None,
                            now: Optional[datetime] = None) -> List[Asset]:
    """Assets that are cooled down and not already entered in a game."""
    return [asset for asset in assets
            if asset.is_cooled_down(now)
            and not is_asset_registered(asset.asset_id, user_id, games)]


def filter_resting_assets(assets: List[Asset], user_id: int,
                          games: Optional[Dict] = None,
                          now: Optional[datetime] = None) -> List[Asset]:
    """Assets still on cooldown and not entered in a game."""
    return [asset for asset in assets
            if not asset.is_cooled_down(now)
            and not is_asset_registered(asset.asset_id, user_id, games)]


def cool_downs_descending(assets: List[Asset], now: Optional[datetime] = None) -> List[Asset]:
    """Resting assets, longest remaining cooldown first."""
    resting = [asset for asset in assets if not asset.is_cooled_down(now)]
    return sorted(resting, key=lambda a: a.dojo_cool_down, reverse=True)


def asset_current_rank(asset: Asset) -> tuple:
    """
    Get an asset's position in the wins ranking.

    Returns:
        (rank, total ranked assets); rank is 0 if the asset never played
    """
    ranked = db.asset_ranking_by_wins_total_games()
    rank = next((index + 1 for index, ranked_asset in enumerate(ranked)
                 if ranked_asset.asset_id == asset.asset_id), 0)
    return rank, len(ranked)


# ==================== FORMATTING ====================

def format_duration(seconds: float) -> str:
    """Human readable duration, e.g. '5h 12m'."""
    seconds = max(0, int(seconds))
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}h {minutes}m"
    if minutes:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def format_karma(amount: float) -> str:
    return f"{amount:,.2f}".rstrip('0').rstrip('.')


# ==================== END OF MATCH ====================

def player_end_game_update(player: Player, win_info: GameWinInfo, channel_cool_down: float,
                           now: Optional[datetime] = None) -> Player:
    """
    Record a finished match for one player.

    Rolls the asset's new cooldown, updates its win/loss/zen counters and
    credits the payout to the owner when the player won. NPCs are skipped.

    Args:
        player: Player as resolved by find_zen_and_winners
        win_info: Winning roll, zen flag and payout of the match
        channel_cool_down: Base cooldown of the channel in seconds
        now: End time of the match

    Returns:
        The player with random_cool_down and cool_down_modified filled in
    """
    if player.is_npc:
        return player

    stats = GameStats(
        wins=1 if player.is_winner else 0,
        losses=0 if player.is_winner else 1,
        zen=1 if player.is_winner and win_info.zen else 0,
    )
    cool_down = roll_for_cool_down(player.asset, player.user_id, channel_cool_down)
    asset = db.asset_end_game_update(player.asset, cool_down, stats, now)
    if player.is_winner:
        db.add_unclaimed_tokens(player.user_id, win_info.payout)
        logger.info(f"User {player.user_id} earned {win_info.payout} karma with asset {asset.asset_id}")
    return replace(player, asset=asset, random_cool_down=cool_down,
                   cool_down_modified=cool_down != channel_cool_down)


def end_game_update(game: GameState, settings: ChannelSettings,
                    now: Optional[datetime] = None) -> List[Player]:
    """Apply player_end_game_update to everyone in the match and record the encounter."""
    players = [player_end_game_update(player, game.game_win_info, settings.cool_down, now)
               for player in game.player_manager.get_all_players()]
    win_info = game.game_win_info
    db.record_encounter(
        chat_id=settings.chat_id,
        game_type=settings.game_type,
        players=[{
            'user_id': player.user_id,
            'asset_id': player.asset.asset_id,
            'is_winner': player.is_winner,
            'is_npc': player.is_npc,
        } for player in players],
        win_info={
            'round': win_info.game_win_round_index,
            'roll': win_info.game_win_roll_index,
            'zen': win_info.zen,
            'payout': win_info.payout,
        },
    )
    return players
