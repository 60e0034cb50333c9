from __future__ import annotations
import urllib.parse
from typing import Mapping, Optional

DEFAULT_PORTS = {
    "https": 443,
    "http": 80,
}


def normalize_headers(headers: Optional[Mapping[str, str]]) -> dict[str, str]:
    # 同じ名前が大文字小文字違いで複数あれば後勝ち
    return {k.lower(): v for k, v in (headers or {}).items()}


def effective_port(u: urllib.parse.SplitResult) -> int:
    """
    明示ポート > scheme既定ポート > 0（不明）。
    不正なポート表記は ValueError（呼び出し側で「不一致」として扱う）。
    """
    port = u.port
    if port is not None:
        return port
    return DEFAULT_PORTS.get(u.scheme.lower(), 0)


def resolve_location(
    location: str, original: urllib.parse.SplitResult
) -> urllib.parse.SplitResult:
    """
    Locationが相対（schemeなし）なら元URLの scheme/host を補う。
    パス部分はそのまま（"foo" は "/foo" にしない）。
    """
    loc = urllib.parse.urlsplit(location)
    if not loc.scheme:
        loc = loc._replace(scheme=original.scheme, netloc=original.netloc)
    return loc


def is_root_path(u: urllib.parse.SplitResult) -> bool:
    return u.path in ("", "/")
