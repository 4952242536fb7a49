# tests/test_game_state.py
import pytest

from dojo_bot.engine import (
    GameState, GameStatus, InvalidTransitionError, NoPlayersError, RenderPhase
)
from dojo_bot.models import GameWinInfo, PlayerManager

from conftest import WIN_AT_2_0, WIN_AT_2_1, WIN_AT_2_2, make_npc, make_player


def state_with(token, *players):
    return GameState(token, player_manager=PlayerManager(players=list(players)))


def cursor(state):
    return state.game_round_state.round_index, state.game_round_state.roll_index


def test_new_state_is_waiting_room(token):
    state = GameState(token)
    assert state.status == GameStatus.WAITING_ROOM
    assert cursor(state) == (0, 0)
    assert state.player_manager.count() == 0


def test_npc_game_type_seats_the_npc(token):
    from dojo_bot.models import GameNPC
    state = GameState(token, GameNPC(name="Karasu", game_type="OneVsNpc", asset_id=1))
    npc = state.player_manager.get_npc()
    assert npc is not None
    assert npc.asset.name == "Karasu"


def test_zen_when_npc_and_human_tie(token):
    state = state_with(token, make_npc(WIN_AT_2_0), make_player(7, WIN_AT_2_0))
    resolved = state.find_zen_and_winners()

    info = resolved.game_win_info
    assert (info.game_win_round_index, info.game_win_roll_index) == (2, 0)
    assert info.zen is True
    assert all(p.is_winner for p in resolved.player_manager.get_all_players())
    # round 3 is inside the base rounds: base * zen multiplier
    assert info.payout == pytest.approx(30)


def test_zen_scenario_advances_to_win(token):
    state = state_with(token, make_npc(WIN_AT_2_0), make_player(7, WIN_AT_2_0))
    state = state.find_zen_and_winners().start_game(min_players=2)

    for _ in range(7):
        state = state.next_roll()

    assert cursor(state) == (2, 0)
    assert state.status == GameStatus.WIN


def test_next_roll_after_win_keeps_cursor(token):
    state = state_with(token, make_player(7, WIN_AT_2_0)).find_zen_and_winners().start_game()
    for _ in range(6):
        state = state.next_roll()
    assert state.status == GameStatus.WIN
    assert state.next_roll() is state


def test_single_winner(token):
    state = state_with(token, make_npc(WIN_AT_2_2), make_player(7, WIN_AT_2_1))
    resolved = state.find_zen_and_winners()

    info = resolved.game_win_info
    assert (info.game_win_round_index, info.game_win_roll_index) == (2, 1)
    assert info.zen is False
    assert info.payout == pytest.approx(20)
    assert resolved.player_manager.get_player(7).is_winner
    assert not resolved.player_manager.get_npc().is_winner


def test_win_point_is_never_after_any_player(token):
    players = [make_npc(WIN_AT_2_2), make_player(7, WIN_AT_2_1), make_player(8, WIN_AT_2_0)]
    resolved = state_with(token, *players).find_zen_and_winners()
    win = (resolved.game_win_info.game_win_round_index, resolved.game_win_info.game_win_roll_index)
    for player in players:
        assert win <= player.rounds_data.win_point


def test_find_winners_leaves_original_untouched(token):
    human = make_player(7, WIN_AT_2_1)
    state = state_with(token, make_npc(WIN_AT_2_2), human)
    state.find_zen_and_winners()

    assert state.game_win_info == GameWinInfo()
    assert human.is_winner is False
    assert state.player_manager.get_player(7).is_winner is False


def test_find_winners_uses_bonus_multiplier(token):
    state = state_with(token, make_player(7, WIN_AT_2_1))
    assert state.find_zen_and_winners(bonus_multiplier=2).game_win_info.payout == pytest.approx(40)
    assert state.find_zen_and_winners(bonus_multiplier=None).game_win_info.payout == pytest.approx(20)


def test_find_winners_without_players(token):
    with pytest.raises(NoPlayersError):
        GameState(token).find_zen_and_winners()


def test_cursor_bounds(token):
    # 21 rolls of 1 win at round 6, roll 2
    state = state_with(token, make_player(7, [1] * 21)).start_game()
    for k in range(1, 7):
        for _ in range(3):
            state = state.next_roll()
            assert state.game_round_state.roll_index in (0, 1, 2)
        assert cursor(state) == (k, 0)


def test_should_increment_round(token):
    state = GameState(token)
    assert not state.should_increment_round()
    state = state.increment_roll().increment_roll()
    assert state.should_increment_round()
    assert cursor(state.next_round()) == (1, 0)


def test_start_game_transitions(token):
    state = state_with(token, make_player(7, WIN_AT_2_0))
    with pytest.raises(InvalidTransitionError):
        state.start_game(min_players=2)
    started = state.start_game(min_players=1, encounter_id=12)
    assert started.status == GameStatus.ACTIVE_GAME
    assert started.encounter_id == 12
    assert state.status == GameStatus.WAITING_ROOM
    with pytest.raises(InvalidTransitionError):
        started.start_game()


def test_finish_game_only_once(token):
    state = state_with(token, make_player(7, WIN_AT_2_0)).update_status(GameStatus.WIN)
    finished = state.finish_game()
    assert finished.status == GameStatus.FINISHED
    with pytest.raises(InvalidTransitionError):
        finished.finish_game()
    assert finished.status == GameStatus.FINISHED


@pytest.mark.parametrize("status", [
    GameStatus.WAITING_ROOM, GameStatus.ACTIVE_GAME, GameStatus.MAINTENANCE, GameStatus.FINISHED,
])
def test_finish_game_requires_win(token, status):
    state = GameState(token).update_status(status)
    with pytest.raises(InvalidTransitionError):
        state.finish_game()
    assert state.status == status


def test_next_roll_in_finished_game(token):
    finished = GameState(token).update_status(GameStatus.WIN).finish_game()
    with pytest.raises(InvalidTransitionError):
        finished.next_roll()


def test_maintenance(token):
    assert GameState(token).maintenance().status == GameStatus.MAINTENANCE
    active = state_with(token, make_player(7, WIN_AT_2_0)).start_game()
    with pytest.raises(InvalidTransitionError):
        active.maintenance()


def test_reset(token):
    state = state_with(token, make_player(7, WIN_AT_2_0)).find_zen_and_winners().start_game()
    state = state.next_roll()
    fresh = state.reset()
    assert fresh.status == GameStatus.WAITING_ROOM
    assert cursor(fresh) == (0, 0)
    assert fresh.player_manager.count() == 0
    assert fresh.game_win_info == GameWinInfo()


def test_set_current_player(token):
    human = make_player(7, WIN_AT_2_0)
    state = state_with(token, make_npc(WIN_AT_2_0), human).set_current_player(human, 1)
    assert state.game_round_state.current_player is human
    assert state.game_round_state.player_index == 1


def test_render_this_board(token):
    state = state_with(token, make_player(7, WIN_AT_2_0))
    board = state.render_this_board(RenderPhase.GIF)
    assert '<b>ROUND</b>' in board
    assert '🎲' in board


def test_transitions_keep_players_apart(token):
    waiting = state_with(token, make_player(7, WIN_AT_2_0))
    rolled = waiting.start_game().next_roll()
    rolled.player_manager.add_player(make_player(8, WIN_AT_2_0))

    assert rolled.player_manager is not waiting.player_manager
    assert waiting.player_manager.count() == 1
    assert waiting.player_manager.get_player(8) is None


def test_add_and_remove_player(token):
    waiting = GameState(token)
    joined = waiting.add_player(make_player(7, WIN_AT_2_0))
    left = joined.remove_player(7)

    assert waiting.player_manager.count() == 0
    assert joined.player_manager.get_player(7) is not None
    assert left.player_manager.count() == 0
