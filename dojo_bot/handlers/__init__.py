# handlers/__init__.py
# Handler modules for the dojo bot

from .basic import (
    start,
    help_command,
    assets_command,
    cooldowns_command,
    karma_command,
    addasset_command,
)

from .dojo import (
    dojo_command,
    join_command,
    withdraw_command,
    play_match,
)

from .admin import (
    setchannel_command,
    maintenance_command,
    boost_command,
)

from .callbacks import button_callback

__all__ = [
    # Basic
    'start',
    'help_command',
    'assets_command',
    'cooldowns_command',
    'karma_command',
    'addasset_command',
    # Dojo
    'dojo_command',
    'join_command',
    'withdraw_command',
    'play_match',
    # Admin
    'setchannel_command',
    'maintenance_command',
    'boost_command',
    # Callbacks
    'button_callback',
]
