from abc import ABC, abstractmethod

from config.settings import Settings


class BaseHardwareModule(ABC):
    """ハードウェアモジュールの抽象基底クラス

    パネルとモジュールが共通で持つライフサイクル。
    現在の実装: Panel (コントロールパネル1枚), Module (パネルの集合)
    """

    @abstractmethod
    def initialize(self, config: Settings | None = None) -> bool:
        """初期化する

        Args:
            config: アプリケーション設定 (省略可)

        Returns:
            bool: 成功時True、失敗時False
        """
        ...

    @abstractmethod
    def connect(self, config: Settings | None = None) -> bool:
        """トランスポートへ接続する

        Args:
            config: アプリケーション設定 (省略可)

        Returns:
            bool: 成功時True、失敗時False
        """
        ...

    @abstractmethod
    def disconnect(self) -> bool:
        """切断する

        Returns:
            bool: 成功時True、失敗時False
        """
        ...
