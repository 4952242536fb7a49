# engine/board.py
# Text game board shown (and edited) in the training chat during a match

from enum import Enum
from typing import List, Optional, Sequence, Union

from dojo_bot.config import TURNS_IN_ROUND, ROUNDS_IN_EMBED
from dojo_bot.models import Player, RollData, RoundData


class RenderPhase(str, Enum):
    """Each roll is revealed in two frames: the dice in motion, then the result."""
    GIF = 'gif'
    EMOJI = 'emoji'


RENDER_PHASES = [RenderPhase.GIF, RenderPhase.EMOJI]

ROUND_WIDTH = 20
ATTACK_ROW_SPACER = '\t'
ROUND_AND_TOTAL_SPACER = '\t'
HORIZONTAL_RULE = '─' * ROUND_WIDTH
PLACEHOLDER = 'ph'
ROLLING = 'roll'

GAME_EMOJIS = {
    1: '1️⃣',
    2: '2️⃣',
    3: '3️⃣',
    PLACEHOLDER: '🔴',
    ROLLING: '🎲',
}

NUMBER_EMOJIS = {
    '0': '0️⃣', '1': '1️⃣', '2': '2️⃣', '3': '3️⃣', '4': '4️⃣',
    '5': '5️⃣', '6': '6️⃣', '7': '7️⃣', '8': '8️⃣', '9': '9️⃣',
}


def emoji_convert(content: str) -> str:
    """Spell out digits as keycap emojis, leaving anything else untouched."""
    return ''.join(NUMBER_EMOJIS.get(char, char) for char in content)


def get_game_emoji(damage_or_other: Optional[Union[int, str]] = None) -> str:
    if damage_or_other is None or damage_or_other == PLACEHOLDER:
        return GAME_EMOJIS[PLACEHOLDER]
    if damage_or_other == ROLLING:
        return GAME_EMOJIS[ROLLING]
    return GAME_EMOJIS.get(damage_or_other) or emoji_convert(str(damage_or_other))


def center_string(space: int, content: str = '', delimiter: str = ' ') -> str:
    pad_space = (space - len(content)) // 2
    return (delimiter * max(pad_space, 0) + content).ljust(space, delimiter)


def bold(content: str) -> str:
    return f"<b>{content}</b>"


def get_image_type(roll: Optional[RollData], is_previous_roll: bool, is_current_roll: bool,
                   is_turn_roll: bool, render_phase: RenderPhase,
                   has_been_turn: bool) -> Union[int, str]:
    """
    Pick which icon a roll cell shows.

    Rolls already played are static. The acting player's current roll shows
    the rolling dice during the GIF phase and its damage during the EMOJI
    phase. Players who acted earlier this turn show their damage, later
    players a placeholder.
    """
    roll_damage = roll.damage if roll is not None else PLACEHOLDER
    if is_previous_roll:
        return roll_damage
    if is_current_roll and is_turn_roll:
        return ROLLING if render_phase == RenderPhase.GIF else roll_damage
    if is_current_roll:
        return roll_damage if has_been_turn else PLACEHOLDER
    return PLACEHOLDER


def _round_at(rounds: Sequence[RoundData], index: int) -> Optional[RoundData]:
    if 0 <= index < len(rounds):
        return rounds[index]
    return None


def _roll_at(round_data: Optional[RoundData], index: int) -> Optional[RollData]:
    if round_data is not None and 0 <= index < len(round_data.rolls):
        return round_data.rolls[index]
    return None


def create_round_cell(round_number: Union[str, int, None] = None) -> str:
    return center_string(ROUND_WIDTH, '' if round_number is None else str(round_number))


def create_round_row() -> str:
    return center_string(ROUND_WIDTH * 2, bold('ROUND'))


def create_round_number_row(round_index: int) -> str:
    is_first_round = round_index == 0
    round_number = round_index + 1
    cells = []
    for index in range(ROUNDS_IN_EMBED):
        if is_first_round and index == 1:
            cells.append(create_round_cell())
        elif not is_first_round and index == 0:
            cells.append(create_round_cell(emoji_convert(str(round_number - 1))))
        else:
            cells.append(create_round_cell(emoji_convert(str(round_number))))
    cells.insert(1, ROUND_AND_TOTAL_SPACER)
    return ''.join(cells)


def create_attack_row(rounds: Sequence[RoundData], roll_index: int, round_index: int,
                      render_phase: RenderPhase, is_turn: bool, has_been_turn: bool) -> str:
    previous_round = _round_at(rounds, round_index - 1)
    current_round = _round_at(rounds, round_index)
    attack_row = []

    if previous_round is not None:
        attack_row.append(' '.join(
            get_game_emoji(roll.damage if roll else None)
            for roll in (_roll_at(previous_round, i) for i in range(TURNS_IN_ROUND))
        ))

    current_cells = []
    for index in range(TURNS_IN_ROUND):
        is_current_roll = index == roll_index
        image = get_image_type(
            _roll_at(current_round, index),
            is_previous_roll=index < roll_index,
            is_current_roll=is_current_roll,
            is_turn_roll=is_current_roll and is_turn,
            render_phase=render_phase,
            has_been_turn=has_been_turn,
        )
        current_cells.append(get_game_emoji(image))
    attack_row.append(' '.join(current_cells))

    # First round has nothing to the left, pad the right with placeholders
    if previous_round is None:
        attack_row.append(' '.join(get_game_emoji(PLACEHOLDER) for _ in range(TURNS_IN_ROUND)))

    attack_row.insert(1, ATTACK_ROW_SPACER)
    return ''.join(attack_row)


def create_total_row(rounds: Sequence[RoundData], roll_index: int, round_index: int,
                     render_phase: RenderPhase, has_been_turn: bool, not_turn_yet: bool) -> str:
    is_first_round = round_index == 0

    previous_round = _round_at(rounds, round_index - 1)
    previous_total = None
    if previous_round is not None and previous_round.rolls:
        previous_total = previous_round.rolls[-1].total_score

    # The running total only includes the current roll once it is revealed
    if (render_phase != RenderPhase.EMOJI or not_turn_yet) and not has_been_turn:
        total_roll_index = roll_index - 1
    else:
        total_roll_index = roll_index
    current_roll = _roll_at(_round_at(rounds, round_index), total_roll_index)
    current_total = current_roll.total_score if current_roll else None

    def total_cell(total: Optional[int]) -> str:
        return create_round_cell(bold(str(total).rjust(2)) if total else None)

    cells = []
    for index in range(ROUNDS_IN_EMBED):
        if is_first_round and index == 1:
            cells.append(create_round_cell())
        elif not is_first_round and index == 0:
            cells.append(total_cell(previous_total))
        else:
            cells.append(total_cell(current_total))
    cells.insert(1, ROUND_AND_TOTAL_SPACER)
    return ''.join(cells)


def create_player_rows(roll_index: int, round_index: int, player_index: int,
                       players: Sequence[Player], render_phase: RenderPhase) -> str:
    rows: List[str] = []
    for index, player in enumerate(players):
        rounds = player.rounds_data.rounds
        attack_row = create_attack_row(
            rounds, roll_index, round_index, render_phase,
            is_turn=index == player_index,
            has_been_turn=index < player_index,
        )
        total_row = create_total_row(
            rounds, roll_index, round_index, render_phase,
            has_been_turn=index < player_index,
            not_turn_yet=index > player_index,
        )
        rows.append('\n'.join([attack_row, total_row, HORIZONTAL_RULE]))
    return '\n'.join(rows)


def render_board(roll_index: int, round_index: int, player_index: int,
                 players: Sequence[Player], render_phase: RenderPhase) -> str:
    """
    Render the board for one frame of the match.

    Args:
        roll_index: Current roll within the round (0-2)
        round_index: Current round (0-based)
        player_index: Index of the acting player
        players: Players in turn order
        render_phase: Which frame of the reveal to draw

    Returns:
        Board text (Telegram HTML)
    """
    if players is None:
        raise ValueError('No players found')
    return '\n'.join([
        create_round_row(),
        create_round_number_row(round_index),
        HORIZONTAL_RULE,
        create_player_rows(roll_index, round_index, player_index, players, render_phase),
    ])
