import logging


def setup_logger(level: int = logging.INFO) -> logging.Logger:
    """
    Создаёт и настраивает логгер пакета ``fgtcluster``.

    :param level: минимальный уровень логирования
    :return: настроенный экземпляр :class:`logging.Logger`
    """
    logger = logging.getLogger("fgtcluster")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "[%(asctime)s] %(levelname)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # Чтобы сообщения не дублировались через root-логгер
    logger.propagate = False

    return logger


def format_problem_prefix(N: int, D: int, K: int) -> str:
    """Префикс для логов: размеры задачи кластеризации."""
    return f"[N={N} D={D} K={K}]"
