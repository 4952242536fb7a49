# tests/conftest.py
import asyncio
from collections import defaultdict

import pytest

from dojo_bot import config
import dojo_bot.database as db
from dojo_bot.engine.dice import damage_calc
from dojo_bot.models import Asset, Player, TokenSettings

# Seven rolls of 6 (3 damage each) land on 21 at round 2, roll 0
WIN_AT_2_0 = [6] * 7
# 18 after six rolls, then 19 and 21: round 2, roll 1
WIN_AT_2_1 = [6] * 6 + [1, 3]
# 18 after six rolls, then 19, 20, 21: round 2, roll 2
WIN_AT_2_2 = [6] * 6 + [1, 1, 1]


def make_player(user_id, rolls, asset=None, is_npc=False):
    asset = asset or Asset(asset_id=100 + user_id, name=f"Asset{user_id}", owner_id=user_id)
    return Player(user_id=user_id, asset=asset, rounds_data=damage_calc(rolls), is_npc=is_npc)


def make_npc(rolls, name="Karasu"):
    asset = Asset(asset_id=1, name=name, owner_id=config.NPC_USER_ID)
    return make_player(config.NPC_USER_ID, rolls, asset=asset, is_npc=True)


@pytest.fixture
def token():
    return TokenSettings(base_amount=20, round_modifier=5, zen_multiplier=1.5, zen_round_modifier=0.5)


@pytest.fixture
def fresh_db(tmp_path, monkeypatch):
    """Empty in-memory store writing to a temporary data file."""
    monkeypatch.setattr(config, 'DATA_FILE', str(tmp_path / 'dojo_data.json'))
    monkeypatch.setattr(db, 'channel_games', {})
    monkeypatch.setattr(db, 'game_locks', defaultdict(asyncio.Lock))
    monkeypatch.setattr(db, 'training_channels', {})
    monkeypatch.setattr(db, 'assets', {})
    monkeypatch.setattr(db, 'next_asset_id', 1000)
    monkeypatch.setattr(db, 'unclaimed_karma', defaultdict(float))
    monkeypatch.setattr(db, 'encounters', [])
    monkeypatch.setattr(db, 'karma_boost', None)
    monkeypatch.setattr(db, 'maintenance_mode', False)
    monkeypatch.setattr(db, 'admin_list', {config.ADMIN_ID})
    return db
