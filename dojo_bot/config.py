# config.py
# Configuration constants, tokens, and game definitions for the dojo bot

import os
import logging

# ==================== LOGGING CONFIGURATION ====================
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=logging.INFO
)
logger = logging.getLogger(__name__)

# ==================== BOT CONFIGURATION ====================
BOT_TOKEN = os.environ.get("DOJO_BOT_TOKEN", "")
ADMIN_ID = int(os.environ.get("DOJO_ADMIN_ID", "0"))
DATA_FILE = os.environ.get("DOJO_DATA_FILE", "dojo_data.json")

KARMA_NAME = "KARMA"
KARMA_EMOJI = "☯️"

# ==================== GAME BOARD ====================
TURNS_IN_ROUND = 3
ROUNDS_IN_EMBED = 2

# Seconds to hold each render phase on screen (min, max)
RENDER_CONFIG = {
    'gif': {'dur_min': 1.0, 'dur_max': 3.5},
    'emoji': {'dur_min': 0.5, 'dur_max': 0.5},
}
# The four player game gets a longer reveal
FOUR_VS_NPC_GIF_DELAY = {'dur_min': 1.5, 'dur_max': 5.0}

# ==================== DICE ====================
MAX_ROLL_VALUE = 6
MAX_DAMAGE_VALUE = 3
TOTAL_DICE_ROLLS = 100
WINNING_SCORE = 21
RESET_SCORE = 15
DICE_RETRIES = 3

# ==================== GAME TYPES CONFIGURATION ====================
SIX_HOURS = 6 * 60 * 60
NINETY_MINUTES = 90 * 60

GAME_TYPES = {
    'OneVsNpc': {
        'name': 'One vs Karasu',
        'emoji': '🐦',
        'min_capacity': 2,
        'max_capacity': 2,
        'cool_down': SIX_HOURS,
        'token': {
            'base_amount': 5,
            'round_modifier': 5,
            'zen_multiplier': 1,
            'zen_round_modifier': 0.5,
        },
        'npc': {'name': 'Karasu', 'asset_id': 1},
    },
    'OneVsOne': {
        'name': 'Player vs Player',
        'emoji': '⚔️',
        'min_capacity': 2,
        'max_capacity': 2,
        'cool_down': SIX_HOURS,
        'token': {
            'base_amount': 20,
            'round_modifier': 5,
            'zen_multiplier': 1.5,
            'zen_round_modifier': 0.5,
        },
        'npc': None,
    },
    'FourVsNpc': {
        'name': 'Four vs Taoshin',
        'emoji': '🐉',
        'min_capacity': 5,
        'max_capacity': 5,
        'cool_down': NINETY_MINUTES,
        'token': {
            'base_amount': 30,
            'round_modifier': 5,
            'zen_multiplier': 3.5,
            'zen_round_modifier': 0.5,
        },
        'npc': {'name': 'Taoshin', 'asset_id': 2},
    },
}

NPC_USER_ID = 0

# ==================== COOLDOWN FACTORS ====================
GAMES_MEDIAN_MAX = {
    'above': {'increase': 0.1, 'decrease': 0},
    'below': {'increase': 0, 'decrease': 0.1},
}
WALLET_MEDIAN_MAX = {
    'above': {'increase': 0.1, 'decrease': 0},
    'below': {'increase': 0, 'decrease': 0.4},
}
RANK_MEDIAN_MAX = {
    'above': {'increase': 0, 'decrease': 0.1},
    'below': {'increase': 0.1, 'decrease': 0},
}

# Longest extension is 80% of the channel cooldown, shortest is zero
TIME_MAX_PERCENTS = {'increase': 0.8, 'decrease': 1.0}

BONUS_CHANCES = {
    'increase_base_chance': 0,
    'decrease_base_chance': 0.2,
    'increase_max_chance': 0.3,
    'decrease_max_chance': 0.8,
}
