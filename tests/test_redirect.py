from wafmatch.matcher import match_redirect
from wafmatch.models import HttpResponse, RedirectCheck

CHECK = RedirectCheck(source_ports=(2052,), target_ports=(443,), redirect_to_root_host=True)


def _resp(request_url: str, location=None) -> HttpResponse:
    headers = {"location": location} if location is not None else {}
    return HttpResponse(301, headers=headers, request_url=request_url)


def _check(resp: HttpResponse, check: RedirectCheck = CHECK) -> bool:
    headers = {k.lower(): v for k, v in resp.headers.items()}
    return match_redirect(check, resp, headers)


def test_port_redirect_to_root():
    assert _check(_resp("https://example.com:2052/", "https://example.com/"))


def test_source_port_not_listed():
    check = RedirectCheck(source_ports=(9999,), target_ports=(443,), redirect_to_root_host=True)
    assert not _check(_resp("https://example.com:2052/", "https://example.com/"), check)


def test_wrong_target_port():
    assert not _check(_resp("https://example.com:2052/", "https://example.com:8080/"))


def test_non_root_path():
    assert not _check(_resp("https://example.com:2052/", "https://example.com/path"))
    # root不要なら通る
    check = RedirectCheck(source_ports=(2052,), target_ports=(443,))
    assert _check(_resp("https://example.com:2052/", "https://example.com/path"), check)


def test_missing_location():
    assert not _check(_resp("https://example.com:2052/"))


def test_relative_location_uses_original_host():
    # 元が https:2052 なので相対Locationの先も 2052 → 443 ではない
    assert not _check(_resp("https://example.com:2052/", "/"))
    check = RedirectCheck(source_ports=(2052,), target_ports=(2052,), redirect_to_root_host=True)
    assert _check(_resp("https://example.com:2052/login", "/"), check)
    assert not _check(_resp("https://example.com:2052/", "/login"), check)


def test_default_ports_by_scheme():
    check = RedirectCheck(source_ports=(80,), target_ports=(443,), redirect_to_root_host=True)
    assert _check(_resp("http://example.com/", "https://example.com"), check)
    assert not _check(_resp("ftp://example.com/", "https://example.com/"), check)


def test_malformed_urls_do_not_match():
    assert not _check(_resp("https://example.com:notaport/", "https://example.com/"))
    assert not _check(_resp("http://[::1/", "https://example.com/"))
    assert not _check(_resp("https://example.com:2052/", "https://example.com:99999/"))


def test_location_header_case_insensitive_through_matcher():
    import json
    from wafmatch.matcher import Matcher

    m = Matcher()
    m.add_rules(
        json.dumps(
            {
                "services": {
                    "edge": {
                        "check_redirect": {
                            "source_ports": [2052],
                            "target_ports": [443],
                            "redirect_to_root_host": True,
                        }
                    }
                }
            }
        )
    )
    resp = HttpResponse(
        301,
        headers={"Location": "https://example.com/"},
        request_url="https://example.com:2052/",
    )
    assert m.match(resp) == ["edge"]
