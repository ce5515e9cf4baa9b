"""
Command Line Interface

Drives a score counter game one action per invocation. The game is saved
after every change, so successive commands continue the same game.

Usage:
    # Start a 4 player game
    skcounter start 4

    # Bidding: raise player 1's bid, rename a player
    skcounter bid 1 +
    skcounter rename 2 Alice

    # Scoring: switch phase, report tricks, flag the Kraken, add captures
    skcounter score
    skcounter tricks Alice +
    skcounter kraken
    skcounter bonus Alice --pirates 1 --black-14

    # Commit the round
    skcounter validate

    # All-time standings
    skcounter profiles --limit 10

    # Freeze the current settings into a config file
    skcounter --data-dir ~/games config --write ~/skcounter.json
"""

import argparse
import logging
import sys
from typing import List, Optional

from skcounter.config import CounterConfig
from skcounter.game.scoring import CaptureBonus
from skcounter.game.session import (
    Advanced,
    GameOver,
    GameSession,
    Phase,
    Player,
    Rejected,
    ScoreKeeperException,
)
from skcounter.keeper import ScoreKeeper

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog='skcounter',
        description="Keep score of a Skull King game",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Configuration
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to JSON config file (overrides defaults)',
    )
    parser.add_argument(
        '--data-dir',
        type=str,
        default=None,
        help='Directory holding the saved game and profiles (overrides config)',
    )

    # Logging
    parser.add_argument(
        '--log-level',
        type=str,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default=None,
        help='Logging level (overrides config)',
    )

    commands = parser.add_subparsers(dest='command', required=True)

    start = commands.add_parser('start', help='Start a new game')
    start.add_argument('players', type=int, help='Number of players (2-12)')

    commands.add_parser('status', help='Show the current round')
    commands.add_parser('score', help='End bidding and start reporting tricks')
    commands.add_parser('kraken', help='Toggle the Kraken discarded trick')
    commands.add_parser('validate', help='Check tricks and commit the round')
    commands.add_parser('new-game', help='Discard the current game')

    for name, help_text in (('bid', 'Adjust a bid'), ('tricks', 'Adjust tricks won')):
        adjust = commands.add_parser(name, help=help_text)
        adjust.add_argument('player', help='Player name or seat number')
        adjust.add_argument('direction', choices=['+', '-'], help='Raise or lower by one')

    bonus = commands.add_parser('bonus', help='Set capture bonus for a player')
    bonus.add_argument('player', help='Player name or seat number')
    bonus.add_argument('--pirates', type=int, default=0, help='Pirates captured by the Skull King')
    bonus.add_argument('--mermaids', type=int, default=0, help='Mermaids captured by a pirate')
    bonus.add_argument('--skull-king', action='store_true', help='Skull King captured by a mermaid')
    bonus.add_argument('--colored-14s', type=int, default=0, help='Yellow, purple or green 14s won')
    bonus.add_argument('--black-14', action='store_true', help='Black 14 won')

    add = commands.add_parser('add', help='Add a player')
    add.add_argument('name', help='New player name')

    remove = commands.add_parser('remove', help='Remove a player')
    remove.add_argument('player', help='Player name or seat number')

    rename = commands.add_parser('rename', help='Rename a player')
    rename.add_argument('player', help='Player name or seat number')
    rename.add_argument('name', help='New name')

    move = commands.add_parser('move', help='Move a player to another seat')
    move.add_argument('player', help='Player name or seat number')
    move.add_argument('seat', type=int, help='New seat number (1-based)')

    profiles = commands.add_parser('profiles', help='Show all-time standings')
    profiles.add_argument(
        '--limit', type=_positive_int, default=None,
        help='Number of profiles to show (defaults to top_profiles)',
    )
    profiles.add_argument('--rename', nargs=2, metavar=('OLD', 'NEW'), help='Rename a profile')
    profiles.add_argument('--reset', metavar='NAME', help='Reset the points of a profile to 0')
    profiles.add_argument('--delete', metavar='NAME', help='Delete a profile')

    show_config = commands.add_parser('config', help='Show the effective configuration')
    show_config.add_argument('--write', metavar='PATH', help='Also save it as a JSON config file')

    return parser.parse_args(argv)


def setup_logging(log_level: str = 'WARNING', log_file: Optional[str] = None):
    """
    Setup logging (console and optional file).

    Args:
        log_level: Logging level
        log_file: Optional file to also write log records to
    """
    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    date_format = '%Y-%m-%d %H:%M:%S'

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, log_level),
        format=log_format,
        datefmt=date_format,
        handlers=handlers,
        force=True,
    )


def load_config(args: argparse.Namespace) -> CounterConfig:
    """Load config from --config (if given) and apply command line overrides."""
    if args.config:
        config = CounterConfig.from_file(args.config)
    else:
        config = CounterConfig()

    if args.data_dir is not None:
        config.data_dir = args.data_dir
    if args.log_level is not None:
        config.log_level = args.log_level

    config.validate()
    return config


def _points(value: int) -> str:
    return f"{value} {'pt' if value == 1 else 'pts'}"


def format_status(session: GameSession) -> str:
    """Round header plus one line per player with the live point preview."""
    header = (
        f"Round {session.current_round}/{session.max_rounds} - "
        f"{session.phase.value} ({session.cards} cards)"
    )
    if session.kraken_discarded:
        header += " [kraken]"
    if session.game_over:
        header += " [game over]"

    lines = [header]
    width = max(len(p.name) for p in session.players)
    for seat, player in enumerate(session.players, start=1):
        if session.phase == Phase.BIDDING:
            detail = f"bid {player.bid}/{session.cards}"
        else:
            detail = f"won {player.tricks_won}/{player.bid}"
            if player.bonus:
                detail += f" +{player.bonus} bonus"
        lines.append(
            f"{seat:>3}. {player.name:<{width}}  {detail:<22} "
            f"{_points(session.preview_points(player))}"
        )
    return "\n".join(lines)


def format_ranking(result: GameOver) -> str:
    lines = ["Final standings:"]
    for rank, player in result.ranking:
        lines.append(f"{rank:>3}. {player.name}  {_points(player.cumulative_points)}")
    return "\n".join(lines)


def _resolve(session: GameSession, ref: str) -> Player:
    player = session.find_player(ref)
    if player is None:
        raise ValueError(f"No player '{ref}' in this game")
    return player


def run_command(keeper: ScoreKeeper, args: argparse.Namespace, limit: int) -> int:
    """
    Execute one sub-command.

    Returns:
        Process exit status
    """
    command = args.command

    if command == 'start':
        session = keeper.start_game(args.players)
        print(format_status(session))
        return 0

    if command == 'new-game':
        keeper.new_game()
        print("Game discarded")
        return 0

    if command == 'profiles':
        if args.rename:
            keeper.ledger.rename(*args.rename)
        if args.reset:
            keeper.ledger.reset_points(args.reset)
        if args.delete:
            keeper.ledger.delete(args.delete)

        profiles = keeper.standings(args.limit if args.limit is not None else limit)
        if not profiles:
            print("No profiles yet")
        for position, profile in enumerate(profiles, start=1):
            print(
                f"{position:>3}. {profile.name}  {_points(profile.cumulative_points)} "
                f"({profile.played_count} games)"
            )
        return 0

    keeper.resume()
    session = keeper.require_session()

    if command == 'bid':
        keeper.adjust_bid(_resolve(session, args.player), 1 if args.direction == '+' else -1)
    elif command == 'tricks':
        keeper.adjust_tricks(_resolve(session, args.player), 1 if args.direction == '+' else -1)
    elif command == 'score':
        keeper.begin_scoring()
    elif command == 'kraken':
        keeper.toggle_kraken()
    elif command == 'bonus':
        captures = CaptureBonus(
            pirates=args.pirates,
            mermaids=args.mermaids,
            skull_king=args.skull_king,
            colored_fourteens=args.colored_14s,
            black_fourteen=args.black_14,
        )
        keeper.apply_bonus(_resolve(session, args.player), captures.total())
    elif command == 'add':
        keeper.add_player(args.name)
    elif command == 'remove':
        keeper.remove_player(_resolve(session, args.player))
    elif command == 'rename':
        keeper.rename_player(_resolve(session, args.player), args.name)
    elif command == 'move':
        keeper.move_player(_resolve(session, args.player), args.seat - 1)
    elif command == 'validate':
        result = keeper.validate_and_advance()
        if isinstance(result, Rejected):
            print(f"Incorrect trick total: {result.mismatch}", file=sys.stderr)
            return 1
        if isinstance(result, GameOver):
            print(format_ranking(result))
            return 0
        if isinstance(result, Advanced):
            print(f"Round {result.new_round} begins")

    print(format_status(session))
    if not keeper.last_save_ok:
        print("Warning: game state could not be saved", file=sys.stderr)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the skcounter console script."""
    args = parse_args(argv)

    try:
        config = load_config(args)
    except (OSError, ValueError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    setup_logging(config.log_level, config.log_file)
    logger.debug(str(config))

    if args.command == 'config':
        print(config)
        if args.write:
            try:
                config.save(args.write)
            except OSError as e:
                print(f"Error: {e}", file=sys.stderr)
                return 1
            print(f"Saved to {args.write}")
        return 0

    try:
        keeper = ScoreKeeper.from_config(config)
        return run_command(keeper, args, config.top_profiles)
    except (ScoreKeeperException, OSError, ValueError, KeyError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
