import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(
    name: str,
    log_file: Optional[str] = None,
    level: int | str = logging.DEBUG,
    console: bool = True,
    file_encoding: str = "utf-8",
) -> logging.Logger:
    """
    ロガーをセットアップする

    Args:
        name: ロガー名（"backend.panel" など）
        log_file: ログファイルのパス（Noneの場合はファイル出力なし）
        level: ログレベル（数値または "INFO" などのレベル名）
        console: コンソール出力するかどうか
        file_encoding: ログファイルのエンコーディング

    Returns:
        設定済みのロガーインスタンス
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # 既存のハンドラをクリア（重複防止）
    if logger.handlers:
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding=file_encoding)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def apply_log_level(level: int | str, loggers: Iterable[logging.Logger]) -> None:
    """
    設定値のログレベルを既存ロガーへまとめて反映する

    ハンドラにはレベルを設定していないため、ロガー側の変更だけで有効になる。

    Args:
        level: ログレベル（Settings.LOG_LEVEL の値など）
        loggers: 対象ロガー
    """
    for logger in loggers:
        logger.setLevel(level)
