from __future__ import annotations

import os
from typing import Optional, Dict, List

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field

from wafmatch.errors import RuleSetError
from wafmatch.extractor import SoupTitleExtractor
from wafmatch.matcher import Matcher, new_matcher
from wafmatch.models import HttpResponse


# -----------------------
# Request / Response
# -----------------------


class MatchRequest(BaseModel):
    status_code: int = Field(..., ge=0)
    headers: Dict[str, str] = Field(default_factory=dict)
    body: str = ""

    # optional
    title: Optional[str] = Field(
        default=None, description="Page title; extracted from body when omitted"
    )
    request_url: str = Field(
        default="", description="Original request URL (redirect rules only)"
    )


class MatchResponse(BaseModel):
    providers: List[str]


class RulesResponse(BaseModel):
    loaded: List[str]
    total: int


# -----------------------
# App + Lifespan
# -----------------------

app = FastAPI(title="wafmatch-server")

# shared singletons
_matcher: Matcher | None = None
_titles = SoupTitleExtractor()


@app.on_event("startup")
async def startup() -> None:
    global _matcher

    # empty -> bundled rules.json
    _matcher = new_matcher(os.getenv("WAFMATCH_RULES_PATH", ""))


@app.post("/match", response_model=MatchResponse)
async def match(req: MatchRequest) -> MatchResponse:
    """
    POST /match
    body: { "status_code": 403, "headers": {...}, "body": "...", ... }
    response: providers[]
    """
    assert _matcher is not None

    title = req.title if req.title is not None else _titles.extract(req.body)
    resp = HttpResponse(
        status_code=req.status_code,
        headers=req.headers,
        body=req.body,
        title=title,
        request_url=req.request_url,
    )
    return MatchResponse(providers=_matcher.match(resp))


@app.post("/rules", response_model=RulesResponse)
async def add_rules(request: Request) -> RulesResponse:
    """
    POST /rules
    body: rule-set document ({"services": {...}})
    """
    assert _matcher is not None

    # handlers run on the event loop, so add_rules never overlaps a match call
    try:
        loaded = _matcher.add_rules(await request.body())
    except RuleSetError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return RulesResponse(loaded=loaded, total=len(_matcher))


@app.get("/providers", response_model=List[str])
async def providers() -> List[str]:
    assert _matcher is not None
    return _matcher.providers
