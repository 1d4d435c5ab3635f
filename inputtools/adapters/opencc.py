import logging
from typing import Optional

from opencc import OpenCC


class ChineseConverter:
    """Hong Kong traditional to simplified conversion for committed text."""

    def __init__(self, config: str = "hk2s"):
        self.config = config
        self._cc: Optional[OpenCC] = None
        try:
            self._cc = OpenCC(config)
        except Exception as e:
            logging.error("[OPENCC] failed to initialise converter config=%s err=%s", config, e)

    def convert(self, text: str) -> str:
        if not text or self._cc is None:
            return text
        try:
            return self._cc.convert(text)
        except Exception as e:
            logging.error("[OPENCC] conversion failed err=%s", e)
            return text
