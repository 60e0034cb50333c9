from __future__ import annotations
from bs4 import BeautifulSoup

from .interfaces import TitleExtractor


class SoupTitleExtractor(TitleExtractor):
    """
    <title>の抽出だけを担当。matcher本体はHTMLを解釈しない。
    """

    def extract(self, html: str) -> str:
        if not html:
            return ""
        soup = BeautifulSoup(html, "html.parser")
        return soup.title.get_text(strip=True) if soup.title else ""
