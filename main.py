import asyncio
import sys

import httpx

from wafmatch.adapters import response_from_httpx
from wafmatch.matcher import new_matcher

from logging import getLogger, basicConfig, INFO, WARNING

basicConfig(level=WARNING, format="[%(levelname)s](%(name)s): %(message)s", force=True)
logger = getLogger("wafmatch.main")
getLogger("wafmatch").setLevel(INFO)


async def main(urls: list[str]):
    matcher = new_matcher()  # 同梱ルール

    async with httpx.AsyncClient() as client:
        for url in urls:
            try:
                # redirectルールのため Location をそのまま受け取る
                r = await client.get(url, follow_redirects=False, timeout=15.0)
            except httpx.HTTPError as e:
                logger.warning(f"request failed {url}: {e}")
                continue

            providers = matcher.match(response_from_httpx(r))
            if providers:
                print(f"{url} -> WAF/CDN detected: {', '.join(providers)}")
            else:
                print(f"{url} -> No WAF/CDN detected")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:] or ["http://example.com/"]))
