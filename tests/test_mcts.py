"""
MCTSのテストケース

- Nodeの基本機能テスト
- select / expand / simulate / backpropagate の各ステップのテスト
- get_best_move の探索ループと局面シナリオのテスト
"""

import numpy as np
import pytest

from tictactoe_mcts.errors import InvalidGameStateError, NoLegalMovesError
from tictactoe_mcts.game.base import GameState
from tictactoe_mcts.game.tictactoe import TicTacToe
from tictactoe_mcts.mcts.mcts import MCTS
from tictactoe_mcts.mcts.node import Node


# 引き分けで埋まった盤面
DRAWN_BOARD = [1, -1, 1,
               1, -1, -1,
               -1, 1, 1]

# Xが2番に打てば勝ち（Xの手番）
X_TO_WIN_AT_2 = [1, 1, 0,
                 -1, -1, 0,
                 0, 0, 0]


class BrokenGame(GameState):
    """勝者として不正な値を返すゲーム"""

    def get_legal_moves(self):
        return []

    def make_move(self, action):
        pass

    def is_terminal(self):
        return True

    def get_winner(self):
        return 2

    def clone(self):
        return BrokenGame()


class ListWinnerGame(BrokenGame):
    """勝者としてハッシュ不可能な値を返すゲーム"""

    def get_winner(self):
        return [1]

    def clone(self):
        return ListWinnerGame()


class StuckGame(BrokenGame):
    """終局していないのに合法手がないゲーム"""

    def is_terminal(self):
        return False

    def get_winner(self):
        return None

    def clone(self):
        return StuckGame()


def expand_and_evaluate(mcts, node_index, reward=0.5):
    """1ノード展開して即座に報酬を伝播する（探索ループと同じ不変条件を保つ）"""
    child = mcts.expand(node_index)
    mcts.backpropagate(child, reward)
    return child


class TestNode:
    """Nodeの基本機能テスト"""

    def test_node_initialization(self):
        """ノードの初期化テスト"""
        node = Node(TicTacToe())

        assert node.parent is None
        assert node.last_action is None
        assert node.children == []
        assert node.wins == 0.0
        assert node.visits == 0.0
        assert node.untried_actions == list(range(9))
        assert node.is_leaf()
        assert not node.is_fully_expanded()

    def test_node_update(self):
        """ノードの統計更新テスト"""
        node = Node(TicTacToe())

        node.update(1.0)
        node.update(0.5)

        assert node.visits == 2.0
        assert node.wins == 1.5

    def test_uct_value(self):
        """UCT値の計算テスト"""
        node = Node(TicTacToe())
        node.wins = 2.0
        node.visits = 4.0

        expected = 0.5 + np.sqrt(2.0 * np.log(10.0) / 4.0)
        assert node.uct_value(10.0) == pytest.approx(expected)

    def test_uct_favors_less_visited_child(self):
        """平均報酬が同じなら訪問回数の少ない方がUCT値が高い"""
        rarely = Node(TicTacToe())
        rarely.wins, rarely.visits = 1.0, 2.0
        often = Node(TicTacToe())
        often.wins, often.visits = 5.0, 10.0

        assert rarely.uct_value(12.0) > often.uct_value(12.0)


class TestArena:
    """ノードアリーナ（MCTSの初期化と展開）のテスト"""

    def test_new_arena_has_single_root(self):
        """初期化直後はルートノードのみ"""
        mcts = MCTS(TicTacToe())
        root = mcts.nodes[mcts.root]

        assert len(mcts) == 1
        assert mcts.root == 0
        assert root.parent is None
        assert root.last_action is None
        assert root.untried_actions == list(range(9))

    def test_root_state_is_a_copy(self):
        """ルートは渡された盤面のコピーを保持する"""
        game = TicTacToe()
        mcts = MCTS(game)

        game.make_move(4)

        assert mcts.nodes[mcts.root].state.get_legal_moves() == list(range(9))

    def test_arena_grows_by_one_per_expansion(self):
        """n回展開するとノード数は1 + n"""
        mcts = MCTS(TicTacToe())

        for n in range(1, 4):
            mcts.expand(mcts.root)
            assert len(mcts) == 1 + n

    def test_expand_takes_last_listed_move_first(self):
        """合法手リストの末尾から展開する"""
        mcts = MCTS(TicTacToe())

        first = mcts.expand(mcts.root)
        second = mcts.expand(mcts.root)

        assert mcts.nodes[first].last_action == 8
        assert mcts.nodes[second].last_action == 7
        assert mcts.nodes[mcts.root].untried_actions == list(range(7))
        assert mcts.nodes[mcts.root].children == [first, second]

    def test_expanded_child(self):
        """子ノードの状態・親・未試行手が正しい"""
        mcts = MCTS(TicTacToe())

        child_index = mcts.expand(mcts.root)
        child = mcts.nodes[child_index]

        assert child.parent == mcts.root
        assert child.wins == 0.0
        assert child.visits == 0.0
        assert child.state.board[8] == 1
        assert child.untried_actions == list(range(8))
        # 親の盤面は変わらない
        assert mcts.nodes[mcts.root].state.board[8] == 0

    def test_expand_fully_expanded_node_returns_best_uct_child(self):
        """展開しきったノードではUCT値最大の子を返し、ノードは増えない"""
        game = TicTacToe.from_cells([1, -1, 1,
                                     -1, 1, -1,
                                     0, 0, -1])
        mcts = MCTS(game)
        good = expand_and_evaluate(mcts, mcts.root, reward=1.0)
        bad = expand_and_evaluate(mcts, mcts.root, reward=0.0)

        size = len(mcts)
        assert mcts.expand(mcts.root) == good
        assert len(mcts) == size
        assert bad != good

    def test_expand_terminal_leaf_returns_same_node(self):
        """未試行手も子もないノードはそのまま返る"""
        mcts = MCTS(TicTacToe.from_cells(DRAWN_BOARD))

        assert mcts.expand(mcts.root) == mcts.root
        assert len(mcts) == 1


class TestSelect:
    """selectのテスト"""

    def test_select_fresh_root(self):
        """初期化直後のselectはルートを返す"""
        mcts = MCTS(TicTacToe())
        assert mcts.select(mcts.root) == mcts.root

    def test_select_partially_expanded_root(self):
        """未試行手が残っていればそのノードを返す"""
        mcts = MCTS(TicTacToe())
        expand_and_evaluate(mcts, mcts.root, reward=1.0)

        assert mcts.select(mcts.root) == mcts.root

    def test_select_descends_to_best_child(self):
        """展開しきったノードからはUCT値最大の子へ降りる"""
        game = TicTacToe.from_cells([1, -1, 1,
                                     -1, 1, -1,
                                     0, 0, -1])
        mcts = MCTS(game)
        good = expand_and_evaluate(mcts, mcts.root, reward=1.0)
        expand_and_evaluate(mcts, mcts.root, reward=0.0)

        # goodの子には未試行手が残っているのでgoodで止まる
        assert mcts.select(mcts.root) == good

    def test_select_tie_keeps_first_child(self):
        """UCT値が同じ子ではchildrenの先頭を選ぶ"""
        game = TicTacToe.from_cells([1, -1, 1,
                                     -1, 1, -1,
                                     0, 0, -1])
        mcts = MCTS(game)
        first = expand_and_evaluate(mcts, mcts.root, reward=0.5)
        second = expand_and_evaluate(mcts, mcts.root, reward=0.5)

        assert mcts.nodes[first].uct_value(2.0) == mcts.nodes[second].uct_value(2.0)
        assert mcts.select(mcts.root) == first
        assert mcts.expand(mcts.root) == first

    def test_select_terminal_leaf(self):
        """子のない終局ノードはそれ自身を返す"""
        mcts = MCTS(TicTacToe.from_cells(DRAWN_BOARD))
        assert mcts.select(mcts.root) == mcts.root


class TestSimulate:
    """simulateのテスト"""

    @pytest.mark.parametrize("cells, expected", [
        ([1, 1, 1, -1, -1, 0, 0, 0, 0], 1.0),
        ([-1, -1, -1, 1, 1, 0, 1, 0, 0], 0.0),
        (DRAWN_BOARD, 0.5),
    ])
    def test_terminal_rewards(self, cells, expected):
        """終局盤面では勝者に応じた報酬を返す"""
        mcts = MCTS(TicTacToe.from_cells(cells))
        assert mcts.simulate(mcts.root) == expected

    def test_random_playout_reward_range(self):
        """ランダムプレイアウトの報酬は 0.0 / 0.5 / 1.0 のいずれか"""
        mcts = MCTS(TicTacToe(), seed=0)

        for _ in range(50):
            assert mcts.simulate(mcts.root) in (0.0, 0.5, 1.0)

    def test_simulate_does_not_mutate_node_state(self):
        """プレイアウトはノードの盤面を変更しない"""
        mcts = MCTS(TicTacToe(), seed=0)
        mcts.simulate(mcts.root)

        assert mcts.nodes[mcts.root].state.get_legal_moves() == list(range(9))

    def test_seeded_rng_is_reproducible(self):
        """同じシードなら同じプレイアウト結果になる"""
        mcts_a = MCTS(TicTacToe(), seed=7)
        mcts_b = MCTS(TicTacToe(), seed=7)

        rewards_a = [mcts_a.simulate(mcts_a.root) for _ in range(20)]
        rewards_b = [mcts_b.simulate(mcts_b.root) for _ in range(20)]
        assert rewards_a == rewards_b

    def test_injected_rng(self):
        """引数で渡した乱数生成器を使う"""
        mcts = MCTS(TicTacToe(), seed=1)

        rewards_a = [mcts.simulate(mcts.root, rng=np.random.default_rng(3)) for _ in range(5)]
        rewards_b = [mcts.simulate(mcts.root, rng=np.random.default_rng(3)) for _ in range(5)]
        assert rewards_a == rewards_b

    def test_unexpected_winner_raises(self):
        """想定外の勝者はゲーム実装の契約違反"""
        mcts = MCTS(BrokenGame())
        with pytest.raises(InvalidGameStateError):
            mcts.simulate(mcts.root)

    def test_unhashable_winner_raises(self):
        """ハッシュ不可能な勝者もTypeErrorではなく契約違反として扱う"""
        mcts = MCTS(ListWinnerGame())
        with pytest.raises(InvalidGameStateError):
            mcts.simulate(mcts.root)

    def test_stuck_game_raises(self):
        """終局していないのに合法手がないのは契約違反"""
        mcts = MCTS(StuckGame())
        with pytest.raises(InvalidGameStateError):
            mcts.simulate(mcts.root)


class TestBackpropagate:
    """backpropagateのテスト"""

    def test_reward_reaches_root_unchanged(self):
        """報酬は手番に関係なく全ての祖先に同じ値で加算される"""
        mcts = MCTS(TicTacToe())
        child = mcts.expand(mcts.root)
        grandchild = mcts.expand(child)

        mcts.backpropagate(grandchild, 1.0)

        for index in (grandchild, child, mcts.root):
            assert mcts.nodes[index].visits == 1.0
            assert mcts.nodes[index].wins == 1.0

    def test_siblings_are_not_updated(self):
        """経路外のノードは更新されない"""
        mcts = MCTS(TicTacToe())
        first = mcts.expand(mcts.root)
        second = mcts.expand(mcts.root)

        mcts.backpropagate(second, 0.5)

        assert mcts.nodes[first].visits == 0.0
        assert mcts.nodes[second].visits == 1.0
        assert mcts.nodes[mcts.root].wins == 0.5


class TestGetBestMove:
    """get_best_moveのテスト"""

    def test_root_visits_equal_iterations(self):
        """早期終了しなければルートの訪問回数は探索回数と一致する"""
        mcts = MCTS(TicTacToe(), seed=0)
        mcts.get_best_move(50)

        assert mcts.nodes[mcts.root].visits == 50.0
        assert len(mcts) == 51

    def test_wins_never_exceed_visits(self):
        """全ノードで 0 <= wins <= visits"""
        mcts = MCTS(TicTacToe(), seed=0)
        mcts.get_best_move(300)

        for node in mcts.nodes:
            assert 0.0 <= node.wins <= node.visits

    def test_best_move_is_most_visited(self):
        """返す手はルートの子で最も訪問回数が多い手"""
        mcts = MCTS(TicTacToe(), seed=0)
        action = mcts.get_best_move(300)

        visits = mcts.get_visit_counts()
        assert visits[action] == max(visits.values())
        assert sum(visits.values()) == mcts.nodes[mcts.root].visits

    def test_empty_board(self):
        """空の盤面では0-8のいずれかを返す"""
        mcts = MCTS(TicTacToe(), seed=0)
        action = mcts.get_best_move(1000)

        assert 0 <= action <= 8

    def test_finds_winning_move(self):
        """一手で勝てる局面では勝ちの手を選ぶ"""
        game = TicTacToe.from_cells(X_TO_WIN_AT_2)
        assert game.current_player == 1

        mcts = MCTS(game, seed=0)
        assert mcts.get_best_move(2000) == 2

    def test_last_empty_cell(self):
        """空きマスが1つなら必ずその手"""
        game = TicTacToe.from_cells([1, -1, 1,
                                     1, -1, -1,
                                     -1, 1, 0])
        mcts = MCTS(game, seed=0)

        assert mcts.get_best_move(10) == 8

    def test_stops_early_when_nothing_to_expand(self):
        """展開できるノードがなくなったら予算を残して終了する"""
        game = TicTacToe.from_cells([1, -1, 1,
                                     1, -1, -1,
                                     -1, 1, 0])
        mcts = MCTS(game, seed=0)
        mcts.get_best_move(100)

        # ルートと唯一の子のみ。2回目の反復で早期終了
        assert len(mcts) == 2
        assert mcts.nodes[mcts.root].visits == 1.0

    def test_terminal_position_raises(self):
        """子ノードが作れない局面では手を返せない"""
        mcts = MCTS(TicTacToe.from_cells(DRAWN_BOARD))

        with pytest.raises(NoLegalMovesError):
            mcts.get_best_move(100)

    def test_zero_iterations_raises(self):
        """探索回数0ではルートに子がない"""
        mcts = MCTS(TicTacToe())

        with pytest.raises(NoLegalMovesError):
            mcts.get_best_move(0)

    def test_same_seed_same_search(self):
        """同じシードなら同じ探索結果になる"""
        mcts_a = MCTS(TicTacToe(), seed=42)
        mcts_b = MCTS(TicTacToe(), seed=42)

        assert mcts_a.get_best_move(200) == mcts_b.get_best_move(200)
        assert mcts_a.get_visit_counts() == mcts_b.get_visit_counts()
