"""
ゲーム状態の抽象基底クラス

探索エンジンはこのインターフェースにのみ依存する。
問題ごとにサブクラスを実装する。
"""

from abc import ABC, abstractmethod
from typing import List, Optional


class GameState(ABC):
    """
    ゲーム状態のインターフェース

    勝者の表現:
        1: 先手の勝ち, -1: 後手の勝ち, 0: 引き分け, None: 対局中
    """

    @abstractmethod
    def get_legal_moves(self) -> List[int]:
        """合法手のリストを返す（重複なし・順序あり）"""
        pass

    @abstractmethod
    def make_move(self, action: int) -> None:
        """
        手を打つ（状態をその場で更新）

        Args:
            action: 合法手のいずれか
        """
        pass

    @abstractmethod
    def is_terminal(self) -> bool:
        """ゲームが終了しているかどうか"""
        pass

    @abstractmethod
    def get_winner(self) -> Optional[int]:
        """勝者を返す (1, -1, 0) 。対局中ならNone"""
        pass

    @abstractmethod
    def clone(self) -> "GameState":
        """可変状態を共有しない独立したコピーを返す"""
        pass
