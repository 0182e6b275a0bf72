"""
例外クラス定義

探索エンジン・ゲーム実装・入力処理で発生するエラー
"""


class MCTSError(Exception):
    """探索エンジン関連の基底例外"""


class NoLegalMovesError(MCTSError):
    """ルートノードに子ノードが1つも作られず、手を返せない"""


class InvalidGameStateError(MCTSError):
    """ゲーム実装がGameStateの契約に違反した（想定外の勝者など）"""


class MalformedInputError(MCTSError, ValueError):
    """人間の着手入力が "<row>-<column>" 形式として解釈できない"""
