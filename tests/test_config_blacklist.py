"""Tests for the media download blacklist compiler."""

from structlog.testing import capture_logs

from relay.config.blacklist import compile_blacklist, matches
from relay.config.document import DocumentStore


def test_invalid_pattern_dropped_and_logged():
    """'(' is skipped with an error; '.*\\.exe$' still matches."""
    store = DocumentStore.load('[general]\nMediaDownloadBlackList = [".*\\\\.exe$", "("]\n')
    with capture_logs() as logs:
        matchers = compile_blacklist(store)
    assert [m.pattern for m in matchers] == [".*\\.exe$"]
    assert matches(matchers, "a.exe")
    assert not matches(matchers, "a.txt")
    errors = [e for e in logs if e["event"] == "blacklist_regex_invalid"]
    assert len(errors) == 1
    assert errors[0]["pattern"] == "("
    assert errors[0]["log_level"] == "error"


def test_patterns_keep_input_order():
    store = DocumentStore.load('[general]\nMediaDownloadBlackList = ["b", "[", "a", "c"]\n')
    assert [m.pattern for m in compile_blacklist(store)] == ["b", "a", "c"]


def test_match_is_unanchored_search():
    store = DocumentStore.load('[general]\nMediaDownloadBlackList = ["\\\\.html"]\n')
    matchers = compile_blacklist(store)
    assert matches(matchers, "index.html")
    assert matches(matchers, "page.html.txt")
    assert not matches(matchers, "index.htm")


def test_unset_blacklist_is_empty():
    assert compile_blacklist(DocumentStore.load("")) == ()
    assert not matches((), "anything.exe")


def test_wrong_type_blacklist_is_empty_and_logged():
    store = DocumentStore.load("[general]\nMediaDownloadBlackList = { a = 1 }\n")
    with capture_logs() as logs:
        assert compile_blacklist(store) == ()
    assert any(e["event"] == "blacklist_invalid_type" for e in logs)


def test_blacklist_from_environment(monkeypatch):
    monkeypatch.setenv("RELAY_GENERAL_MEDIADOWNLOADBLACKLIST", r"\.exe$ \.bat$")
    matchers = compile_blacklist(DocumentStore.load(""))
    assert matches(matchers, "setup.bat")
    assert not matches(matchers, "notes.md")
