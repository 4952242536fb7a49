# utils/__init__.py
# Utility functions and decorators for the dojo bot

from .decorators import handle_errors
from .helpers import (
    is_admin,
    get_user_link,
    build_game_type,
    is_asset_registered,
    filter_available_assets,
    filter_resting_assets,
    cool_downs_descending,
    asset_current_rank,
    format_duration,
    format_karma,
    player_end_game_update,
    end_game_update,
)

__all__ = [
    'handle_errors',
    'is_admin',
    'get_user_link',
    'build_game_type',
    'is_asset_registered',
    'filter_available_assets',
    'filter_resting_assets',
    'cool_downs_descending',
    'asset_current_rank',
    'format_duration',
    'format_karma',
    'player_end_game_update',
    'end_game_update',
]
