# tests/test_dice.py
import pytest

from dojo_bot.engine.dice import (
    NoWinningRollError,
    complete_game_for_player,
    damage_calc,
    generate_dice_damage_map,
    generate_npc_player,
)
from dojo_bot.models import GameNPC

from conftest import WIN_AT_2_0


def test_damage_map():
    assert generate_dice_damage_map() == {1: 1, 2: 1, 3: 2, 4: 2, 5: 3, 6: 3}


def test_damage_calc_win_point():
    data = damage_calc(WIN_AT_2_0)
    assert data.win_point == (2, 0)
    assert [len(r.rolls) for r in data.rounds] == [3, 3, 1]
    assert data.rounds[-1].rolls[-1].total_score == 21
    assert data.rounds[0].rolls[0].damage == 3


def test_damage_calc_resets_on_overshoot():
    # 18, then 19, then 22 resets to 15, then 18 and 21
    data = damage_calc([6] * 6 + [2, 6, 6, 6])
    totals = [roll.total_score for rnd in data.rounds for roll in rnd.rolls]
    assert totals == [3, 6, 9, 12, 15, 18, 19, 15, 18, 21]
    assert data.win_point == (3, 0)


def test_damage_calc_without_win():
    with pytest.raises(NoWinningRollError):
        damage_calc([1] * 5)


def test_complete_game_retries_then_fails():
    calls = []

    def dice(count):
        calls.append(count)
        return [1] * 5

    with pytest.raises(NoWinningRollError):
        complete_game_for_player(dice_function=dice)
    assert calls == [100, 100, 100]


def test_complete_game_with_injected_dice():
    data = complete_game_for_player(dice_function=lambda count: [6] * count)
    assert data.win_point == (2, 0)


def test_generated_sequences_always_win():
    for _ in range(20):
        data = complete_game_for_player()
        last = data.rounds[data.game_win_round_index].rolls[data.game_win_roll_index]
        assert last.total_score == 21


def test_generate_npc_player():
    npc = generate_npc_player(GameNPC(name="Taoshin", game_type="FourVsNpc", asset_id=2))
    assert npc.is_npc
    assert npc.user_id == 0
    assert npc.asset.asset_id == 2
    assert npc.asset.name == "Taoshin"
