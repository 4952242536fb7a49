# models.py
# Data types for the dojo training game: rolls, players, economy and stats

import sys
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict, List, Optional


# ==================== ROLLS ====================

@dataclass(frozen=True)
class RollData:
    """A single dice roll, its damage and the running total after it."""
    roll: int
    damage: int
    total_score: int


@dataclass(frozen=True)
class RoundData:
    """Up to three rolls played in one round."""
    rolls: List[RollData] = field(default_factory=list)


@dataclass(frozen=True)
class RoundsData:
    """
    A player's full pre-generated roll sequence.

    The win indices point at the round/roll (inside this sequence) where the
    running total first reaches the winning score.
    """
    rounds: List[RoundData] = field(default_factory=list)
    game_win_round_index: int = 0
    game_win_roll_index: int = 0

    @property
    def win_point(self) -> tuple:
        return (self.game_win_round_index, self.game_win_roll_index)


# ==================== ECONOMY ====================

@dataclass(frozen=True)
class TokenSettings:
    """Karma payout constants for one channel/game type."""
    base_amount: float
    round_modifier: float
    zen_multiplier: float
    zen_round_modifier: float


@dataclass(frozen=True)
class IncreaseDecrease:
    increase: float = 0
    decrease: float = 0


@dataclass(frozen=True)
class MedianMaxes:
    """Bounds for a cooldown factor when a stat is above or below the average."""
    above_median_max: IncreaseDecrease
    below_median_max: IncreaseDecrease

    @classmethod
    def from_dict(cls, data: Dict[str, Dict[str, float]]) -> 'MedianMaxes':
        return cls(
            above_median_max=IncreaseDecrease(**data['above']),
            below_median_max=IncreaseDecrease(**data['below']),
        )


@dataclass
class GameBonusData:
    """Comparative statistics for one asset against the whole population."""
    average_total_games: float = 0
    average_total_assets: float = 0
    average_rank: float = 0
    average_wins: float = 0
    asset_total_games: int = 0
    user_total_assets: int = 0
    asset_rank: int = 0
    asset_wins: int = 0


@dataclass(frozen=True)
class GameStats:
    """Counter increments applied to an asset after a match."""
    wins: int = 0
    losses: int = 0
    zen: int = 0


# ==================== ASSETS & CHANNELS ====================

@dataclass
class Asset:
    """A collectible that can be entered into training."""
    asset_id: int
    name: str
    unit_name: str = ''
    owner_id: int = 0
    dojo_wins: int = 0
    dojo_losses: int = 0
    dojo_zen: int = 0
    dojo_cool_down: Optional[datetime] = None

    @property
    def total_games(self) -> int:
        return self.dojo_wins + self.dojo_losses

    def is_cooled_down(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now()
        return self.dojo_cool_down is None or self.dojo_cool_down <= now

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if self.dojo_cool_down is not None:
            data['dojo_cool_down'] = self.dojo_cool_down.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Asset':
        data = dict(data)
        if data.get('dojo_cool_down'):
            data['dojo_cool_down'] = datetime.fromisoformat(data['dojo_cool_down'])
        return cls(**data)


@dataclass(frozen=True)
class GameNPC:
    name: str
    game_type: str
    asset_id: int


@dataclass(frozen=True)
class ChannelSettings:
    chat_id: int
    game_type: str
    min_capacity: int
    max_capacity: int
    cool_down: int
    token: TokenSettings
    npc: Optional[GameNPC] = None


# ==================== PLAYERS ====================

@dataclass(frozen=True)
class Player:
    """
    One participant of a match.

    Args:
        user_id: Telegram user ID of the owner (NPC_USER_ID for the NPC)
        asset: The asset being trained
        rounds_data: Pre-generated roll sequence for this match
        is_winner: Set once the match winners are resolved
        is_npc: True for the computer controlled opponent
    """
    user_id: int
    asset: Asset
    rounds_data: RoundsData
    is_winner: bool = False
    is_npc: bool = False
    random_cool_down: float = 0
    cool_down_modified: bool = False

    @classmethod
    def register(cls, user_id: int, asset: Asset, is_npc: bool = False) -> 'Player':
        """Build a player with a freshly generated roll sequence."""
        from dojo_bot.engine.dice import complete_game_for_player
        return cls(user_id=user_id, asset=asset,
                   rounds_data=complete_game_for_player(), is_npc=is_npc)


class PlayerManager:
    """Ordered players of one match. Insertion order is turn order."""

    def __init__(self, npc: Optional[Player] = None, players: Optional[List[Player]] = None):
        self._players: List[Player] = list(players or [])
        if npc is not None and self.get_player_index(npc.user_id) < 0:
            self._players.insert(0, npc)

    def add_player(self, player: Player) -> bool:
        """
        Add a player, or swap the entry of an already registered user.

        Returns:
            True if the player was added or their asset changed
        """
        index = self.get_player_index(player.user_id)
        if index < 0:
            self._players.append(player)
            return True
        existing = self._players[index]
        self._players[index] = player
        return existing.asset.asset_id != player.asset.asset_id

    def remove_player(self, user_id: int) -> bool:
        index = self.get_player_index(user_id)
        if index >= 0:
            del self._players[index]
            return True
        return False

    def get_player(self, user_id: int) -> Optional[Player]:
        for player in self._players:
            if player.user_id == user_id:
                return player
        return None

    def get_player_index(self, user_id: int) -> int:
        for index, player in enumerate(self._players):
            if player.user_id == user_id:
                return index
        return -1

    def get_all_players(self) -> List[Player]:
        return list(self._players)

    def get_npc(self) -> Optional[Player]:
        return next((p for p in self._players if p.is_npc), None)

    def count(self) -> int:
        return len(self._players)

    def copy(self) -> 'PlayerManager':
        return PlayerManager(players=self._players)

    def __len__(self) -> int:
        return len(self._players)


# ==================== GAME STATE PARTS ====================

@dataclass(frozen=True)
class GameRoundState:
    """The match cursor."""
    player_index: int = 0
    roll_index: int = 0
    round_index: int = 0
    current_player: Optional[Player] = None


@dataclass(frozen=True)
class GameWinInfo:
    game_win_round_index: int = sys.maxsize
    game_win_roll_index: int = sys.maxsize
    zen: bool = False
    payout: float = 0
