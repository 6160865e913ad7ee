"""Configuration surface of Request: URL, payload, headers, options, timeout."""

from __future__ import annotations

from decimal import Decimal
from fractions import Fraction

import pytest

from requestx import ConfigurationError, Request
from requestx.handle import DEFAULT_OPTIONS


def test_constructor_accepts_valid_url() -> None:
    request = Request("https://example.com/api")
    assert request.url == "https://example.com/api"


def test_invalid_url_is_ignored_and_prior_value_kept() -> None:
    request = Request("http://example.com/first")
    request.set_url("not a url")
    assert request.url == "http://example.com/first"


def test_invalid_url_leaves_target_unset() -> None:
    request = Request("not a url")
    assert request.url is None
    request.set_url("/relative/path")
    assert request.url is None


def test_strict_mode_raises_on_invalid_url() -> None:
    request = Request(strict=True)
    with pytest.raises(ConfigurationError):
        request.set_url("example.com")
    assert request.url is None


def test_default_options() -> None:
    request = Request()
    assert request.options == dict(DEFAULT_OPTIONS)
    assert request.options["allow_redirects"] is False


def test_options_first_write_wins() -> None:
    request = Request()
    request.set_options({"k": 1})
    request.set_options({"k": 2, "other": "x"})
    assert request.options["k"] == 1
    assert request.options["other"] == "x"


def test_options_cannot_override_defaults() -> None:
    request = Request()
    request.set_options({"allow_redirects": True})
    assert request.options["allow_redirects"] is False


def test_payload_last_write_wins_and_reserializes() -> None:
    request = Request("http://example.com/form")
    request.set_post_data({"a": "1"})
    assert request.options["data"] == "a=1"

    request.set_post_data({"a": "2", "b": "3"})

    assert request.post_data == {"a": "2", "b": "3"}
    assert request.options["data"] == "a=2&b=3"
    assert request.options["method"] == "POST"


def test_empty_payload_keeps_method_unset() -> None:
    request = Request()
    request.set_post_data({})
    assert "method" not in request.options
    assert "data" not in request.options


def test_payload_is_urlencoded() -> None:
    request = Request()
    request.set_post_data({"q": "a b&c", "tags": ["x", "y"]})
    assert request.options["data"] == "q=a+b%26c&tags%5B0%5D=x&tags%5B1%5D=y"


def test_headers_are_appended_not_deduplicated() -> None:
    request = Request()
    request.set_headers({"A": "1"})
    request.set_headers({"A": "1"})
    assert request.headers == ["A: 1", "A: 1"]
    assert request.options["headers"] == ["A: 1", "A: 1"]


def test_headers_accept_literal_lines() -> None:
    request = Request()
    request.set_headers(["Accept: text/html", "X-Trace: abc"])
    request.set_headers({"Accept": "application/json", 0: "X-Raw: yes"})
    assert request.headers == [
        "Accept: text/html",
        "X-Trace: abc",
        "Accept: application/json",
        "X-Raw: yes",
    ]


def test_timeout_sets_option_in_seconds() -> None:
    request = Request()
    request.set_timeout(1500)
    assert request.timeout == 1500
    assert request.options["timeout"] == pytest.approx(1.5)


def test_timeout_overrides_previous_timeout() -> None:
    request = Request()
    request.set_timeout(1000)
    request.set_timeout(250)
    assert request.timeout == 250
    assert request.options["timeout"] == pytest.approx(0.25)


@pytest.mark.parametrize(
    "value", [0, -5, -0.1, True, "100", None, float("nan"), float("inf"), Decimal("-1")]
)
def test_non_positive_timeout_is_ignored(value) -> None:
    request = Request()
    request.set_timeout(value)
    assert request.timeout is None
    assert "timeout" not in request.options


def test_strict_mode_raises_on_bad_timeout() -> None:
    request = Request(strict=True)
    with pytest.raises(ConfigurationError):
        request.set_timeout(0)


def test_non_callable_listener_is_dropped() -> None:
    request = Request()
    request.add_listener("not callable")
    assert request.listeners == ()


def test_strict_mode_raises_on_non_callable_listener() -> None:
    request = Request(strict=True)
    with pytest.raises(ConfigurationError):
        request.add_listener(42)


def test_accessors_return_copies() -> None:
    request = Request()
    request.set_headers({"A": "1"})
    request.headers.append("B: 2")
    request.options["extra"] = True
    request.post_data["x"] = "y"
    assert request.headers == ["A: 1"]
    assert "extra" not in request.options
    assert request.post_data == {}


def test_nested_payload_is_flattened_with_brackets() -> None:
    request = Request("http://example.com/form")
    request.set_post_data({"user": {"name": "ann", "id": "7"}, "note": None, "ok": True})

    assert request.options["data"] == "user%5Bname%5D=ann&user%5Bid%5D=7&ok=1"
    assert request.post_data["note"] is None


def test_payload_booleans_and_nested_lists() -> None:
    request = Request()
    request.set_post_data({"flags": [True, False], "matrix": {"row": [1, 2]}})
    assert request.options["data"] == (
        "flags%5B0%5D=1&flags%5B1%5D=0&matrix%5Brow%5D%5B0%5D=1&matrix%5Brow%5D%5B1%5D=2"
    )


def test_unsafe_header_values_are_dropped() -> None:
    request = Request("http://example.com/")
    request.set_headers({"X-A": "1\r\nEvil: yes", "X-B": "2"})
    request.set_headers(["no colon", "X-C: ok"])

    assert request.headers == ["X-B: 2", "X-C: ok"]
    handle = request.get_handle()
    assert "Evil" not in handle.prepared.headers
    assert handle.prepared.headers["X-B"] == "2"


def test_strict_mode_raises_on_unsafe_header_and_keeps_nothing() -> None:
    request = Request(strict=True)
    with pytest.raises(ConfigurationError):
        request.set_headers({"X-Ok": "1", "X-A": "1\nEvil: yes"})
    assert request.headers == []


def test_timeout_accepts_decimal_and_fraction() -> None:
    request = Request()
    request.set_timeout(Decimal("1500"))
    assert request.timeout == Decimal("1500")
    assert request.options["timeout"] == pytest.approx(1.5)

    other = Request()
    other.set_timeout(Fraction(1, 2))
    assert other.options["timeout"] == pytest.approx(0.0005)


def test_strict_mode_raises_on_infinite_timeout() -> None:
    request = Request(strict=True)
    with pytest.raises(ConfigurationError):
        request.set_timeout(float("inf"))
    assert request.timeout is None
