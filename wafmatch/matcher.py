from __future__ import annotations
import urllib.parse
from pathlib import Path
from typing import Dict, Iterator, Mapping, Optional, Union

from .compiler import compile_rules
from .errors import RuleReadError
from .models import CompiledRule, HttpResponse, RedirectCheck
from .schema import parse_rule_set
from .url_utils import effective_port, is_root_path, normalize_headers, resolve_location

from logging import getLogger

logger = getLogger(__name__)

DEFAULT_RULES_PATH = Path(__file__).with_name("rules.json")


def read_rules_file(path: Union[str, Path]) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise RuleReadError(f"reading rules file: {e}") from e


def match_redirect(
    check: RedirectCheck, response: HttpResponse, headers: Mapping[str, str]
) -> bool:
    """
    元リクエストのポートと Location のリダイレクト先を突き合わせる。
    URLが壊れている場合は例外にせず「不一致」。
    """
    try:
        original = urllib.parse.urlsplit(response.request_url)
        original_port = effective_port(original)
    except ValueError as e:
        logger.debug(f"bad request url {response.request_url!r}: {e}")
        return False

    if original_port not in check.source_ports:
        return False

    location = headers.get("location")
    if location is None:
        return False

    try:
        target = resolve_location(location, original)
        target_port = effective_port(target)
    except ValueError as e:
        logger.debug(f"bad location {location!r}: {e}")
        return False

    if check.redirect_to_root_host and not is_root_path(target):
        return False

    return target_port in check.target_ports


def match_rule(
    rule: CompiledRule, response: HttpResponse, headers: Mapping[str, str]
) -> bool:
    """
    headers は小文字キーに正規化済みのもの。
    設定されている条件をすべて満たしたときだけ True（AND）。
    """
    if rule.status_min and response.status_code < rule.status_min:
        return False
    if rule.status_max and response.status_code > rule.status_max:
        return False

    for name, needle in rule.headers.items():
        value = headers.get(name)
        if value is None or needle not in value:
            return False

    body = response.body or ""
    for needle in rule.body_contains:
        if needle not in body:
            return False

    for rx in rule.body_regex:
        if not rx.search(body):
            return False

    if rule.title_exact and response.title != rule.title_exact:
        return False

    if rule.redirect is not None:
        if not match_redirect(rule.redirect, response, headers):
            return False

    return True


class Matcher:
    """
    provider名 -> CompiledRule の索引。
    - 構築後は読み取り専用として使う想定（add_rules中の並行matchは呼び出し側で排他する）
    - 複数providerに同時にマッチし得る（優先度なし）
    """

    def __init__(self, rules: Optional[Mapping[str, CompiledRule]] = None) -> None:
        self._rules: Dict[str, CompiledRule] = dict(rules or {})

    @classmethod
    def from_path(cls, rules_path: Union[str, Path, None] = None) -> "Matcher":
        source = str(rules_path) if rules_path else "bundled"
        data = read_rules_file(rules_path or DEFAULT_RULES_PATH)

        matcher = cls()
        loaded = matcher.add_rules(data)
        logger.info(f"loaded {len(loaded)} rules ({source})")
        return matcher

    def add_rules(self, data: Union[bytes, str]) -> list[str]:
        """
        rule-set文書をマージする。同名providerは丸ごと置き換え。
        バッチ内で1つでもコンパイルに失敗したら何も反映しない。
        """
        compiled = compile_rules(parse_rule_set(data))

        # 新しいdictに差し替える（読み手は古い/新しいどちらかを見る）
        rules = dict(self._rules)
        rules.update(compiled)
        self._rules = rules
        return sorted(compiled)

    def match(self, response: HttpResponse) -> list[str]:
        headers = normalize_headers(response.headers)
        rules = self._rules
        return sorted(
            provider
            for provider, rule in rules.items()
            if match_rule(rule, response, headers)
        )

    def rule(self, provider: str) -> Optional[CompiledRule]:
        return self._rules.get(provider)

    @property
    def providers(self) -> list[str]:
        return sorted(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, provider: object) -> bool:
        return provider in self._rules

    def __iter__(self) -> Iterator[str]:
        return iter(self.providers)


def new_matcher(rules_path: Union[str, Path, None] = "") -> Matcher:
    """空なら同梱のrules.json、指定があればそのファイルを読む。"""
    return Matcher.from_path(rules_path)
