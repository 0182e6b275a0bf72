"""
MCTSノード定義

ノードはアリーナ（MCTS.nodes のリスト）に格納され、
親子関係はリストのインデックスで表現する
"""

import numpy as np
from typing import List, Optional

from ..game.base import GameState


class Node:
    """
    探索木のノード

    各ノードは以下の情報を保持:
    - 盤面の独立したコピー
    - 親・子ノードのインデックス
    - 累積報酬 (wins) と訪問回数 (visits)
    - まだ子ノードにしていない合法手 (untried_actions)

    UCT式:
        wins / visits + sqrt(2 * ln(N_parent) / visits)
    """

    def __init__(
        self,
        state: GameState,
        parent: Optional[int] = None,
        last_action: Optional[int] = None,
    ):
        """
        Args:
            state (GameState): このノードが所有する盤面（呼び出し側でコピー済み）
            parent (int, optional): 親ノードのインデックス（ルートはNone）
            last_action (int, optional): 親からこのノードに至った手（ルートはNone）
        """
        self.state = state
        self.parent = parent
        self.last_action = last_action

        self.children: List[int] = []
        self.wins = 0.0
        self.visits = 0.0

        # 作成時点の合法手。以後再計算しない
        self.untried_actions: List[int] = state.get_legal_moves()

    def is_fully_expanded(self) -> bool:
        """未試行の手が残っていないか"""
        return len(self.untried_actions) == 0

    def is_leaf(self) -> bool:
        """子ノードを持たないか"""
        return len(self.children) == 0

    def uct_value(self, parent_visits: float) -> float:
        """
        UCT値を計算

        Args:
            parent_visits (float): 親ノードの訪問回数

        Returns:
            float: 平均報酬 + 探索ボーナス（探索定数はsqrt(2)固定）
        """
        exploitation = self.wins / self.visits
        exploration = np.sqrt(2.0 * np.log(parent_visits) / self.visits)
        return float(exploitation + exploration)

    def update(self, reward: float):
        """
        統計情報を更新（バックプロパゲーション）

        Args:
            reward (float): プレイアウト結果 (0.0, 0.5, 1.0)
        """
        self.visits += 1.0
        self.wins += reward

    def __repr__(self) -> str:
        """デバッグ用の文字列表現"""
        return (f"Node(action={self.last_action}, "
                f"N={self.visits:.0f}, "
                f"W={self.wins:.1f}, "
                f"untried={len(self.untried_actions)}, "
                f"children={len(self.children)})")
