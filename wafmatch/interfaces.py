from __future__ import annotations
from typing import Protocol


class TitleExtractor(Protocol):
    def extract(self, html: str) -> str:
        """return <title> text ("" if none)"""
        ...
