from __future__ import annotations
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import RuleParseError


# -----------------------
# Rule-set document (JSON)
# -----------------------

# null は「未指定」扱い。型違い（"80" や "true"）は変換せずエラーにする


class RedirectCheckSpec(BaseModel):
    model_config = ConfigDict(strict=True)

    source_ports: Optional[List[int]] = None
    target_ports: Optional[List[int]] = None
    redirect_to_root_host: Optional[bool] = None


class RuleDescription(BaseModel):
    model_config = ConfigDict(strict=True)

    # "503" or "400-499"
    http_status_code: Optional[str] = None
    # header name -> 値に含まれるべき部分文字列
    http_header: Optional[Dict[str, str]] = None
    http_body: Optional[List[str]] = None
    http_body_regex: Optional[List[str]] = None
    http_title: Optional[str] = None
    check_redirect: Optional[RedirectCheckSpec] = None


class RuleSetDocument(BaseModel):
    model_config = ConfigDict(strict=True)

    services: Optional[Dict[str, RuleDescription]] = None


def parse_rule_set(data: Union[bytes, str]) -> Dict[str, RuleDescription]:
    """
    JSON文書 -> provider名ごとの RuleDescription。
    JSONとして壊れている / 構造が違う場合はどちらも RuleParseError。
    """
    try:
        doc = RuleSetDocument.model_validate_json(data)
    except ValidationError as e:
        raise RuleParseError(f"parsing rules JSON: {e}") from e
    return dict(doc.services or {})
