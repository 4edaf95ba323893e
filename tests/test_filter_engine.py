from __future__ import annotations

import re

import pytest

from core.filter_engine import compile_ignore_pattern, should_forward
from core.models import EntityType, FormattedText, TextEntity


def test_absent_text_is_never_forwarded() -> None:
    assert not should_forward(None, None)
    assert not should_forward(None, re.compile("#aff"))


def test_no_pattern_allows_everything() -> None:
    assert should_forward(FormattedText("anything #aff"), None)
    assert should_forward(FormattedText(""), None)


def test_pattern_blocks_substring_matches() -> None:
    pattern = compile_ignore_pattern("#aff")
    assert not should_forward(FormattedText("hello #aff world"), pattern)
    assert should_forward(FormattedText("hello world"), pattern)


def test_pattern_ignores_entities() -> None:
    pattern = compile_ignore_pattern("bold")
    text = FormattedText("plain words", (TextEntity(0, 5, EntityType.BOLD),))
    assert should_forward(text, pattern)


def test_compile_ignore_pattern_empty_means_none() -> None:
    assert compile_ignore_pattern(None) is None
    assert compile_ignore_pattern("") is None


def test_compile_ignore_pattern_rejects_malformed_regex() -> None:
    with pytest.raises(re.error):
        compile_ignore_pattern("([unclosed")
