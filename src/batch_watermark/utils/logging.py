"""日志初始化。"""

from __future__ import annotations

import logging


def setup_logging(level: int = logging.INFO) -> None:
    """初始化项目日志配置。"""

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(threadName)s] %(levelname)s %(name)s: %(message)s",
    )
    # pypdf 在遇到轻微格式问题时会大量输出 warning
    logging.getLogger("pypdf").setLevel(max(level, logging.ERROR))
