from __future__ import annotations
import re
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple


@dataclass(frozen=True)
class HttpResponse:
    status_code: int
    # ヘッダ名の大文字小文字は区別しない前提（matcher側で正規化する）
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str = ""
    title: str = ""
    # redirectルールでのみ使う
    request_url: str = ""


@dataclass(frozen=True)
class RedirectCheck:
    source_ports: Tuple[int, ...] = ()
    target_ports: Tuple[int, ...] = ()
    redirect_to_root_host: bool = False


@dataclass(frozen=True)
class CompiledRule:
    """
    RuleDescriptionをコンパイルした実行形式。
    - 空/None のフィールドは制約なし（常に満たす）
    - status_min / status_max の 0 は「その側は上限/下限なし」
    """

    status_min: int = 0
    status_max: int = 0
    headers: Mapping[str, str] = field(default_factory=dict)
    body_contains: Tuple[str, ...] = ()
    body_regex: Tuple[re.Pattern[str], ...] = ()
    title_exact: str = ""
    redirect: Optional[RedirectCheck] = None

    @property
    def is_empty(self) -> bool:
        return not (
            self.status_min
            or self.status_max
            or self.headers
            or self.body_contains
            or self.body_regex
            or self.title_exact
            or self.redirect
        )
