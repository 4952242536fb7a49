# database.py
# Data persistence, asset records and population statistics

import json
import os
import logging
from datetime import datetime, timedelta
from collections import defaultdict
from typing import List, Optional

from dojo_bot import config
from dojo_bot.models import Asset, GameBonusData, GameStats
from dojo_bot.engine.payout import active_payout_modifier

logger = logging.getLogger(__name__)

# ==================== DATA STRUCTURES ====================

# Active training games per chat (chat_id -> GameState)
channel_games = {}

# Async locks for game operations
game_locks = defaultdict(lambda: None)  # Will be replaced with asyncio.Lock() at runtime

# Training channels (chat_id -> game type)
training_channels = {}

# Assets by id
assets = {}
next_asset_id = 1000

# Karma earned in training and not yet claimed (user_id -> amount)
unclaimed_karma = defaultdict(float)

# Finished matches
encounters = []

# Temporary payout modifier {'modifier', 'start', 'expiry'}
karma_boost = None

maintenance_mode = False

# Admin management
admin_list = {config.ADMIN_ID}


def init_game_locks():
    """Initialize asyncio locks for game operations."""
    import asyncio
    global game_locks
    game_locks = defaultdict(asyncio.Lock)


# ==================== JSON DATA PERSISTENCE ====================

def save_data():
    """Save all data to JSON file."""
    try:
        boost = None
        if karma_boost:
            boost = {
                'modifier': karma_boost['modifier'],
                'start': karma_boost['start'].isoformat(),
                'expiry': karma_boost['expiry'].isoformat(),
            }
        data = {
            'training_channels': {str(k): v for k, v in training_channels.items()},
            'assets': {str(k): asset.to_dict() for k, asset in assets.items()},
            'next_asset_id': next_asset_id,
            'unclaimed_karma': {str(k): v for k, v in unclaimed_karma.items()},
            'encounters': encounters,
            'karma_boost': boost,
            'maintenance_mode': maintenance_mode,
            'admin_list': list(admin_list),
        }

        with open(config.DATA_FILE, 'w') as f:
            json.dump(data, f, indent=2)

        logger.info("Data saved successfully")
    except (OSError, TypeError, ValueError) as e:
        logger.error(f"Error saving data: {e}")


def load_data():
    """Load all data from JSON file."""
    global next_asset_id, karma_boost, maintenance_mode

    try:
        if not os.path.exists(config.DATA_FILE):
            logger.info("No data file found, starting fresh")
            return

        with open(config.DATA_FILE, 'r') as f:
            data = json.load(f)

        training_channels.update({int(k): v for k, v in data.get('training_channels', {}).items()})
        for asset_id, asset_data in data.get('assets', {}).items():
            assets[int(asset_id)] = Asset.from_dict(asset_data)
        next_asset_id = data.get('next_asset_id', next_asset_id)
        unclaimed_karma.update({int(k): float(v) for k, v in data.get('unclaimed_karma', {}).items()})
        encounters.extend(data.get('encounters', []))

        boost = data.get('karma_boost')
        if boost:
            karma_boost = {
                'modifier': boost['modifier'],
                'start': datetime.fromisoformat(boost['start']),
                'expiry': datetime.fromisoformat(boost['expiry']),
            }
        maintenance_mode = data.get('maintenance_mode', False)
        admin_list.update(set(data.get('admin_list', [config.ADMIN_ID])))

        logger.info("Data loaded successfully")
    except (OSError, ValueError, KeyError, TypeError) as e:
        logger.error(f"Error loading data: {e}")


# ==================== ASSETS ====================

def add_asset(owner_id: int, name: str) -> Asset:
    """Create a new asset for a user."""
    global next_asset_id
    next_asset_id += 1
    asset = Asset(asset_id=next_asset_id, name=name, unit_name=name.upper()[:8], owner_id=owner_id)
    assets[asset.asset_id] = asset
    save_data()
    return asset


def get_asset(asset_id: int) -> Optional[Asset]:
    return assets.get(asset_id)


def get_user_assets(user_id: int) -> List[Asset]:
    return [asset for asset in assets.values() if asset.owner_id == user_id]


def get_total_assets_by_user(user_id: int) -> int:
    return len(get_user_assets(user_id))


def asset_end_game_update(asset: Asset, cool_down: float, stats: GameStats,
                          now: Optional[datetime] = None) -> Asset:
    """
    Apply a finished match to an asset.

    Args:
        asset: Asset that played
        cool_down: Seconds the asset has to rest
        stats: Win/loss/zen increments
        now: End time of the match

    Returns:
        The stored (updated) asset
    """
    now = now or datetime.now()
    stored = assets.get(asset.asset_id, asset)
    stored.dojo_wins += stats.wins
    stored.dojo_losses += stats.losses
    stored.dojo_zen += stats.zen
    stored.dojo_cool_down = now + timedelta(seconds=cool_down)
    assets[stored.asset_id] = stored
    save_data()
    return stored


def add_unclaimed_tokens(user_id: int, amount: float) -> float:
    """Credit karma to a user. Returns the new unclaimed total."""
    unclaimed_karma[user_id] += amount
    save_data()
    return unclaimed_karma[user_id]


def record_encounter(chat_id: int, game_type: str, players: list, win_info: dict) -> int:
    """Store a finished match and return its id."""
    encounter_id = len(encounters) + 1
    encounters.append({
        'id': encounter_id,
        'chat_id': chat_id,
        'game_type': game_type,
        'players': players,
        'win_info': win_info,
        'timestamp': datetime.now().isoformat(),
    })
    save_data()
    return encounter_id


# ==================== KARMA BOOST & MAINTENANCE ====================

def set_temporary_payout_modifier(modifier: float, start: datetime, expiry: datetime):
    global karma_boost
    karma_boost = {'modifier': modifier, 'start': start, 'expiry': expiry}
    logger.info(f"Karma boost x{modifier} set from {start} until {expiry}")
    save_data()


def get_temporary_payout_modifier(now: Optional[datetime] = None) -> Optional[float]:
    """Return the karma boost modifier if one is active at `now`, else None."""
    return active_payout_modifier(karma_boost, now)


def set_maintenance(enabled: bool):
    global maintenance_mode
    maintenance_mode = enabled
    save_data()


def is_in_maintenance() -> bool:
    return maintenance_mode


# ==================== STATISTICS ====================

def asset_ranking_by_wins_total_games() -> List[Asset]:
    """
    Rank assets that have played: most wins first, ties broken by win rate.
    """
    played = [asset for asset in assets.values() if asset.total_games > 0]
    return sorted(played, key=lambda a: (-a.dojo_wins, -(a.dojo_wins / a.total_games)))


def get_average_assets_owned() -> int:
    owner_counts = defaultdict(int)
    for asset in assets.values():
        owner_counts[asset.owner_id] += 1
    if not owner_counts:
        return 0
    return round(sum(owner_counts.values()) / len(owner_counts))


def get_bonus_data(asset: Asset, user_total_assets: int) -> GameBonusData:
    """
    Compare an asset to the population for the cooldown roll.

    Args:
        asset: Asset that just played
        user_total_assets: Number of assets its owner holds

    Returns:
        GameBonusData for the asset
    """
    all_assets = list(assets.values())
    ranked = asset_ranking_by_wins_total_games()

    average_total_games = 0
    average_wins = 0
    if all_assets:
        total_wins = sum(a.dojo_wins for a in all_assets)
        total_games = sum(a.total_games for a in all_assets)
        average_total_games = round(total_games / len(all_assets))
        average_wins = round(total_wins / len(all_assets))

    # Rank positions are 1..n, the average is their midpoint
    average_rank = round(sum(range(1, len(ranked) + 1)) / len(ranked)) if ranked else 1

    asset_rank = next(
        (index + 1 for index, ranked_asset in enumerate(ranked)
         if ranked_asset.asset_id == asset.asset_id),
        0,
    )

    return GameBonusData(
        average_total_games=average_total_games,
        average_total_assets=get_average_assets_owned(),
        average_rank=average_rank,
        average_wins=average_wins,
        asset_total_games=asset.total_games,
        user_total_assets=user_total_assets,
        asset_rank=asset_rank,
        asset_wins=asset.dojo_wins,
    )
