from __future__ import annotations

from core.formatted_text import CONTENT_TEXT_VISIBILITY, extract_text, texts_equal
from core.models import ContentKind, EntityType, FormattedText, MessageContent, TextEntity, TextKind


def _text(value: str, *entities: TextEntity, kind: TextKind = TextKind.PARSED) -> FormattedText:
    return FormattedText(text=value, entities=tuple(entities), kind=kind)


def test_absent_operands_never_match() -> None:
    text = _text("hello")
    assert not texts_equal(None, None)
    assert not texts_equal(None, text)
    assert not texts_equal(text, None)


def test_equal_values_are_reflexive_and_symmetric() -> None:
    a = _text("Join our group!", TextEntity(0, 4, EntityType.BOLD))
    b = _text("Join our group!", TextEntity(0, 4, EntityType.BOLD))
    assert texts_equal(a, a)
    assert texts_equal(a, b)
    assert texts_equal(b, a)


def test_entity_payload_is_ignored() -> None:
    a = _text("link", TextEntity(0, 4, EntityType.TEXT_URL, raw="https://a.example"))
    b = _text("link", TextEntity(0, 4, EntityType.TEXT_URL, raw="https://b.example"))
    assert texts_equal(a, b)


def test_differences_break_equality() -> None:
    base = _text("hello", TextEntity(0, 5, EntityType.BOLD))
    assert not texts_equal(base, _text("hello!", TextEntity(0, 5, EntityType.BOLD)))
    assert not texts_equal(base, _text("hello", TextEntity(0, 4, EntityType.BOLD)))
    assert not texts_equal(base, _text("hello", TextEntity(1, 5, EntityType.BOLD)))
    assert not texts_equal(base, _text("hello", TextEntity(0, 5, EntityType.ITALIC)))
    assert not texts_equal(base, _text("hello"))
    assert not texts_equal(base, _text("hello", TextEntity(0, 5, EntityType.BOLD), kind=TextKind.PLAIN))
    assert not texts_equal(base, FormattedText("hello", base.entities, TextKind.PARSED, extra="tag"))


def test_entity_order_matters() -> None:
    bold = TextEntity(0, 2, EntityType.BOLD)
    italic = TextEntity(3, 2, EntityType.ITALIC)
    assert not texts_equal(_text("ab cd", bold, italic), _text("ab cd", italic, bold))


def test_visibility_table_covers_every_content_kind() -> None:
    assert set(CONTENT_TEXT_VISIBILITY) == set(ContentKind)


def test_extract_text_by_content_kind() -> None:
    body = _text("caption")
    for kind in (ContentKind.TEXT, ContentKind.PHOTO, ContentKind.VIDEO, ContentKind.DOCUMENT):
        assert extract_text(MessageContent(kind=kind, text=body)) is body
    assert extract_text(MessageContent(kind=ContentKind.OTHER, text=body)) is None
    assert extract_text(MessageContent(kind=ContentKind.PHOTO)) is None
    assert extract_text(None) is None


def test_text_kinds_are_plain_and_parsed() -> None:
    assert [kind.value for kind in TextKind] == ["plain", "parsed"]
