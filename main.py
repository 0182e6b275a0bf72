"""
tictactoe-mcts - CLIエントリポイント

対戦・評価用のコマンドラインインターフェース
"""

import argparse
import yaml
from pathlib import Path
from typing import Optional

from tictactoe_mcts.game.tictactoe import TicTacToe
from tictactoe_mcts.eval.players import HumanPlayer, MCTSPlayer, RandomPlayer, spawn_seeds
from tictactoe_mcts.eval.arena import evaluate_player


DEFAULT_CONFIG = Path(__file__).parent / "configs" / "default.yaml"

RESULT_MESSAGES = {
    1: "X wins!",
    -1: "O wins!",
    0: "It's a draw!",
}


def load_config(config_path: Optional[str] = None) -> dict:
    """
    YAML設定ファイルを読み込む

    Args:
        config_path: 設定ファイルのパス（省略時は configs/default.yaml があれば使う）

    Returns:
        dict: 設定辞書
    """
    if config_path is None:
        if not DEFAULT_CONFIG.exists():
            return {}
        config_path = DEFAULT_CONFIG
    with open(config_path, 'r', encoding='utf-8') as f:
        config = yaml.safe_load(f)
    return config or {}


def resolve_setting(value, config: dict, section: str, key: str, default):
    """コマンドライン引数 > 設定ファイル > デフォルト の順に値を決める"""
    if value is not None:
        return value
    configured = config.get(section, {}).get(key)
    return default if configured is None else configured


def play_command(args):
    """
    対戦コマンド（AI(X, 先手) vs 人間(O)）

    Args:
        args: argparseの引数
    """
    config = load_config(args.config)
    iterations = resolve_setting(args.iterations, config, 'mcts', 'iterations', 10000)
    seed = resolve_setting(args.seed, config, 'system', 'seed', None)

    ai = MCTSPlayer(iterations=iterations, seed=seed)
    human = HumanPlayer()
    game = TicTacToe()

    print(f"MCTS iterations per move: {iterations}")
    print(game.render() + "\n")

    while not game.is_terminal():
        best_move = ai.get_action(game)
        print(f"Best move: {best_move}")
        if args.stats:
            visits = ai.last_search.get_visit_counts()
            print("Visits: " + ", ".join(f"{a}={v:.0f}" for a, v in sorted(visits.items())))
        game.make_move(best_move)
        print(game.render() + "\n")

        if not game.is_terminal():
            game.make_move(human.get_action(game))
            print(game.render() + "\n")

    print(RESULT_MESSAGES[game.get_winner()])


def eval_command(args):
    """
    評価コマンド（MCTS vs ランダム）

    Args:
        args: argparseの引数
    """
    config = load_config(args.config)
    games = resolve_setting(args.games, config, 'eval', 'games', 20)
    iterations = resolve_setting(args.iterations, config, 'eval', 'iterations', 1000)
    seed = resolve_setting(None, config, 'system', 'seed', None)

    print("=" * 70)
    print("MCTS Evaluation")
    print("=" * 70)
    print(f"Games: {games}")
    print(f"MCTS iterations: {iterations}")

    ai_seed, opponent_seed = spawn_seeds(seed, 2)
    ai_player = MCTSPlayer(iterations=iterations, seed=ai_seed)
    opponent = RandomPlayer(seed=opponent_seed)

    eval_result = evaluate_player(
        player=ai_player,
        opponent=opponent,
        num_games=games,
        verbose=args.verbose,
    )

    print(f"\nResult vs {opponent.name}:")
    print(f"  Win Rate:  {eval_result['win_rate'] * 100:.1f}%")
    print(f"  Draw Rate: {eval_result['draw_rate'] * 100:.1f}%")
    print(f"  Loss Rate: {eval_result['loss_rate'] * 100:.1f}%")
    print(f"  Avg Moves: {eval_result['avg_moves']:.1f}")


def main():
    """メインエントリポイント"""
    parser = argparse.ArgumentParser(description="tictactoe-mcts - CLI")

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Play コマンド
    play_parser = subparsers.add_parser('play', help='Play against the AI')
    play_parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to config file (default: configs/default.yaml)'
    )
    play_parser.add_argument(
        '--iterations',
        type=int,
        default=None,
        help='MCTS iterations per move (default: from config, 10000)'
    )
    play_parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Random seed for playouts'
    )
    play_parser.add_argument(
        '--stats',
        action='store_true',
        help='Show root visit counts after each AI move'
    )
    play_parser.set_defaults(func=play_command)

    # Eval コマンド
    eval_parser = subparsers.add_parser('eval', help='Evaluate MCTS against a random player')
    eval_parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to config file (default: configs/default.yaml)'
    )
    eval_parser.add_argument(
        '--games',
        type=int,
        default=None,
        help='Number of games (default: from config)'
    )
    eval_parser.add_argument(
        '--iterations',
        type=int,
        default=None,
        help='MCTS iterations per move (default: from config)'
    )
    eval_parser.add_argument(
        '--verbose',
        action='store_true',
        help='Show detailed game progress'
    )
    eval_parser.set_defaults(func=eval_command)

    args = parser.parse_args()

    if hasattr(args, 'func'):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
