from __future__ import annotations
import re
from typing import Dict, Mapping, Optional, Tuple

from .errors import InvalidPatternError, InvalidRuleFormatError
from .models import CompiledRule, RedirectCheck
from .schema import RuleDescription

from logging import getLogger

logger = getLogger(__name__)

_INT_RE = re.compile(r"[+-]?[0-9]+")


def _atoi(text: str) -> Optional[int]:
    if not _INT_RE.fullmatch(text):
        return None
    return int(text)


def parse_status_spec(
    spec: Optional[str], *, provider: Optional[str] = None
) -> Tuple[int, int]:
    """
    "503" -> (503, 503), "400-499" -> (400, 499)。
    0 は「その側に制約なし」。数値にならない値は制約なし扱い。
    """
    if not spec:
        return 0, 0

    parts = spec.split("-")
    if len(parts) == 1:
        status = _atoi(parts[0])
        if status is None:
            return 0, 0
        return status, status

    if len(parts) == 2:
        lo = _atoi(parts[0]) or 0
        hi = _atoi(parts[1]) or 0
        # 片側でも不正なら範囲ごと適用しない
        if lo > 0 and hi > 0:
            return lo, hi
        return 0, 0

    raise InvalidRuleFormatError(spec, provider=provider)


def compile_patterns(
    patterns: Optional[list[str]], *, provider: Optional[str] = None
) -> Tuple[re.Pattern[str], ...]:
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns or []:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise InvalidPatternError(pattern, provider=provider) from e
    return tuple(compiled)


def compile_rule(
    desc: RuleDescription, *, provider: Optional[str] = None
) -> CompiledRule:
    status_min, status_max = parse_status_spec(desc.http_status_code, provider=provider)

    headers = {k.lower(): v for k, v in (desc.http_header or {}).items()}

    redirect = None
    if desc.check_redirect is not None:
        redirect = RedirectCheck(
            source_ports=tuple(desc.check_redirect.source_ports or ()),
            target_ports=tuple(desc.check_redirect.target_ports or ()),
            redirect_to_root_host=bool(desc.check_redirect.redirect_to_root_host),
        )

    rule = CompiledRule(
        status_min=status_min,
        status_max=status_max,
        headers=headers,
        body_contains=tuple(desc.http_body or ()),
        body_regex=compile_patterns(desc.http_body_regex, provider=provider),
        title_exact=desc.http_title or "",
        redirect=redirect,
    )
    if rule.is_empty:
        logger.warning(f"rule has no predicates, matches every response: {provider}")
    return rule


def compile_rules(descs: Mapping[str, RuleDescription]) -> Dict[str, CompiledRule]:
    # 1つでも失敗したら例外（途中までの結果は返さない）
    compiled: Dict[str, CompiledRule] = {}
    for provider, desc in descs.items():
        compiled[provider] = compile_rule(desc, provider=provider)
        logger.debug(f"compiled rule: {provider}")
    return compiled
