# tests/test_database.py
import json
from datetime import datetime, timedelta

import pytest

from dojo_bot import config
from dojo_bot.models import Asset, GameStats


def seed(db):
    db.assets.update({
        1: Asset(asset_id=1, name="A", owner_id=10, dojo_wins=5, dojo_losses=5),
        2: Asset(asset_id=2, name="B", owner_id=10, dojo_wins=5, dojo_losses=1),
        3: Asset(asset_id=3, name="C", owner_id=20, dojo_wins=7, dojo_losses=10),
        4: Asset(asset_id=4, name="D", owner_id=30),
    })


def test_add_asset_persists(fresh_db):
    asset = fresh_db.add_asset(42, "Daruma")
    assert asset.asset_id == 1001
    assert fresh_db.get_asset(1001) is asset
    assert fresh_db.get_total_assets_by_user(42) == 1

    with open(config.DATA_FILE) as f:
        data = json.load(f)
    assert data['assets']['1001']['name'] == "Daruma"
    assert data['next_asset_id'] == 1001


def test_save_and_load_round_trip(fresh_db):
    asset = fresh_db.add_asset(42, "Daruma")
    fresh_db.training_channels[-100] = 'OneVsNpc'
    fresh_db.asset_end_game_update(asset, 3600, GameStats(wins=1), now=datetime(2024, 1, 1))
    fresh_db.add_unclaimed_tokens(42, 12.5)

    fresh_db.assets.clear()
    fresh_db.training_channels.clear()
    fresh_db.unclaimed_karma.clear()
    fresh_db.load_data()

    loaded = fresh_db.get_asset(asset.asset_id)
    assert loaded.dojo_wins == 1
    assert loaded.dojo_cool_down == datetime(2024, 1, 1, 1, 0)
    assert fresh_db.training_channels[-100] == 'OneVsNpc'
    assert fresh_db.unclaimed_karma[42] == pytest.approx(12.5)


def test_load_without_file(fresh_db):
    fresh_db.load_data()
    assert fresh_db.assets == {}


def test_ranking_by_wins_then_ratio(fresh_db):
    seed(fresh_db)
    ranked = [asset.name for asset in fresh_db.asset_ranking_by_wins_total_games()]
    assert ranked == ["C", "B", "A"]


def test_average_assets_owned(fresh_db):
    assert fresh_db.get_average_assets_owned() == 0
    seed(fresh_db)
    # owners hold 2, 1 and 1 assets
    assert fresh_db.get_average_assets_owned() == 1


def test_bonus_data(fresh_db):
    seed(fresh_db)
    bonus = fresh_db.get_bonus_data(fresh_db.get_asset(2), user_total_assets=2)
    assert bonus.average_total_games == 8
    assert bonus.average_wins == 4
    assert bonus.average_rank == 2
    assert bonus.asset_rank == 2
    assert bonus.average_total_assets == 1
    assert bonus.asset_total_games == 6
    assert bonus.asset_wins == 5
    assert bonus.user_total_assets == 2


def test_bonus_data_for_unranked_asset(fresh_db):
    seed(fresh_db)
    bonus = fresh_db.get_bonus_data(fresh_db.get_asset(4), user_total_assets=1)
    assert bonus.asset_rank == 0


def test_bonus_data_empty_population(fresh_db):
    bonus = fresh_db.get_bonus_data(Asset(asset_id=9, name="X"), user_total_assets=0)
    assert bonus.average_rank == 1
    assert bonus.average_total_games == 0


def test_asset_end_game_update(fresh_db):
    asset = fresh_db.add_asset(42, "Daruma")
    now = datetime(2024, 5, 1, 12, 0)
    fresh_db.asset_end_game_update(asset, 5400, GameStats(wins=1, zen=1), now=now)
    fresh_db.asset_end_game_update(asset, 60, GameStats(losses=1), now=now)
    assert (asset.dojo_wins, asset.dojo_losses, asset.dojo_zen) == (1, 1, 1)
    assert asset.dojo_cool_down == now + timedelta(seconds=60)


def test_unclaimed_tokens_accumulate(fresh_db):
    fresh_db.add_unclaimed_tokens(42, 5)
    assert fresh_db.add_unclaimed_tokens(42, 7.5) == pytest.approx(12.5)


def test_temporary_payout_modifier(fresh_db):
    start = datetime.now() - timedelta(hours=1)
    fresh_db.set_temporary_payout_modifier(2, start, start + timedelta(hours=3))
    assert fresh_db.get_temporary_payout_modifier() == 2
    assert fresh_db.get_temporary_payout_modifier(start + timedelta(hours=4)) is None


def test_maintenance_flag(fresh_db):
    assert fresh_db.is_in_maintenance() is False
    fresh_db.set_maintenance(True)
    assert fresh_db.is_in_maintenance() is True


def test_record_encounter(fresh_db):
    first = fresh_db.record_encounter(-100, 'OneVsNpc', [{'user_id': 1}], {'zen': False})
    second = fresh_db.record_encounter(-100, 'OneVsNpc', [], {})
    assert (first, second) == (1, 2)
    assert fresh_db.encounters[0]['game_type'] == 'OneVsNpc'
