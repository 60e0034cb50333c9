from __future__ import annotations
from typing import Optional

import httpx

from .extractor import SoupTitleExtractor
from .interfaces import TitleExtractor
from .models import HttpResponse


def response_from_httpx(
    r: httpx.Response,
    *,
    title: Optional[str] = None,
    request_url: Optional[str] = None,
    extractor: Optional[TitleExtractor] = None,
) -> HttpResponse:
    """
    取得済みの httpx.Response -> HttpResponse。
    redirect判定をするなら follow_redirects=False で取得したものを渡すこと
    （追従後だと Location が残らない）。
    """
    # 同名ヘッダは ", " で連結
    headers: dict[str, str] = {}
    for name, value in r.headers.multi_items():
        headers[name] = f"{headers[name]}, {value}" if name in headers else value

    body = r.text
    if title is None:
        title = (extractor or SoupTitleExtractor()).extract(body)
    if request_url is None:
        request_url = str(r.request.url)

    return HttpResponse(
        status_code=r.status_code,
        headers=headers,
        body=body,
        title=title,
        request_url=request_url,
    )
