"""Tests for the post entity model: author value type, validation, public shape."""

from datetime import UTC, datetime, timedelta, timezone

import pytest
from blog_api.models.post import (
    Author,
    PostPublic,
    PostValidationError,
    parse_post_id,
    to_public_representation,
    validate_for_create_or_replace,
)
from pydantic import ValidationError

VALID_BODY = {
    "title": "An interesting thought",
    "content": "Dogs and balls.",
    "author": {"firstName": "lil Dude", "lastName": "McGee"},
}

_CREATED = datetime(2025, 6, 1, 12, 0, 0, tzinfo=UTC)


def _stored(**overrides: object) -> dict:
    doc = {
        "id": "0123456789abcdef0123456789abcdef",
        "title": "Title",
        "content": "Body",
        "author": {"firstName": "Ada", "lastName": "Lovelace"},
        "created": _CREATED,
    }
    doc.update(overrides)
    return doc


# ---------------------------------------------------------------------------
# Author value type
# ---------------------------------------------------------------------------


class TestAuthor:
    def test_display_name(self) -> None:
        author = Author(firstName="lil Dude", lastName="McGee")
        assert author.display_name == "lil Dude McGee"

    def test_accepts_field_names(self) -> None:
        author = Author(first_name="Ada", last_name="Lovelace")
        assert author.to_document() == {"firstName": "Ada", "lastName": "Lovelace"}

    def test_names_are_stripped(self) -> None:
        author = Author(firstName="  Ada ", lastName=" Lovelace")
        assert author.display_name == "Ada Lovelace"

    @pytest.mark.parametrize(
        "data",
        [
            {"firstName": "Ada"},
            {"lastName": "Lovelace"},
            {"firstName": "", "lastName": "Lovelace"},
            {"firstName": "Ada", "lastName": "   "},
            {},
        ],
    )
    def test_partial_author_rejected(self, data: dict) -> None:
        with pytest.raises(ValidationError):
            Author.model_validate(data)

    def test_is_immutable(self) -> None:
        author = Author(firstName="Ada", lastName="Lovelace")
        with pytest.raises(ValidationError):
            author.first_name = "Grace"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# validate_for_create_or_replace
# ---------------------------------------------------------------------------


class TestValidateForCreateOrReplace:
    def test_returns_stored_shape(self) -> None:
        fields = validate_for_create_or_replace(VALID_BODY)
        assert fields == VALID_BODY

    def test_extra_keys_dropped(self) -> None:
        fields = validate_for_create_or_replace(
            {**VALID_BODY, "id": "abc", "created": "yesterday", "likes": 3},
        )
        assert set(fields) == {"title", "content", "author"}

    def test_title_stripped_content_kept(self) -> None:
        fields = validate_for_create_or_replace(
            {**VALID_BODY, "title": "  Spaced  ", "content": "  indented\n"},
        )
        assert fields["title"] == "Spaced"
        assert fields["content"] == "  indented\n"

    def test_long_values_accepted(self) -> None:
        body = {
            "title": "t" * 5_000,
            "content": "c" * 50_000,
            "author": {"firstName": "F" * 1_000, "lastName": "L" * 1_000},
        }
        assert validate_for_create_or_replace(body) == body

    @pytest.mark.parametrize("name", ["title", "content", "author"])
    def test_missing_field(self, name: str) -> None:
        body = {k: v for k, v in VALID_BODY.items() if k != name}
        with pytest.raises(PostValidationError) as exc_info:
            validate_for_create_or_replace(body)
        assert any(msg.startswith(name) for msg in exc_info.value.messages)

    @pytest.mark.parametrize("name", ["title", "content"])
    @pytest.mark.parametrize("value", ["", "   "])
    def test_empty_field(self, name: str, value: str) -> None:
        with pytest.raises(PostValidationError):
            validate_for_create_or_replace({**VALID_BODY, name: value})

    def test_missing_last_name(self) -> None:
        with pytest.raises(PostValidationError, match="author.lastName"):
            validate_for_create_or_replace(
                {**VALID_BODY, "author": {"firstName": "Ada"}},
            )

    def test_author_as_string_rejected(self) -> None:
        with pytest.raises(PostValidationError):
            validate_for_create_or_replace({**VALID_BODY, "author": "Ada Lovelace"})

    def test_non_string_title_rejected(self) -> None:
        with pytest.raises(PostValidationError):
            validate_for_create_or_replace({**VALID_BODY, "title": 42})

    @pytest.mark.parametrize("payload", [None, [], "text", 5])
    def test_non_object_rejected(self, payload: object) -> None:
        with pytest.raises(PostValidationError, match="JSON object"):
            validate_for_create_or_replace(payload)

    def test_all_problems_reported(self) -> None:
        with pytest.raises(PostValidationError) as exc_info:
            validate_for_create_or_replace({})
        assert len(exc_info.value.messages) == 3


# ---------------------------------------------------------------------------
# parse_post_id
# ---------------------------------------------------------------------------


class TestParsePostId:
    def test_valid_id(self) -> None:
        raw = "0123456789abcdef0123456789abcdef"
        assert parse_post_id(raw) == raw

    def test_uppercase_canonicalized(self) -> None:
        assert parse_post_id("ABCDEF0123456789ABCDEF0123456789") == (
            "abcdef0123456789abcdef0123456789"
        )

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "123",
            "0123456789abcdef0123456789abcdeg",
            "0123456789abcdef0123456789abcdef0",
            "01234567-89ab-cdef-0123-456789abcdef",
        ],
    )
    def test_malformed_ids(self, raw: str) -> None:
        with pytest.raises(PostValidationError, match="malformed"):
            parse_post_id(raw)


# ---------------------------------------------------------------------------
# to_public_representation
# ---------------------------------------------------------------------------


class TestPublicRepresentation:
    def test_flattens_author(self) -> None:
        public = to_public_representation(_stored())
        assert public.author == "Ada Lovelace"

    def test_passes_through_fields(self) -> None:
        public = to_public_representation(_stored())
        assert public.id == "0123456789abcdef0123456789abcdef"
        assert public.title == "Title"
        assert public.content == "Body"
        assert public.created == _CREATED

    def test_exact_public_keys(self) -> None:
        dumped = to_public_representation(_stored()).model_dump(mode="json")
        assert set(dumped) == {"id", "title", "content", "author", "created"}

    def test_created_is_iso_string_in_json(self) -> None:
        dumped = to_public_representation(_stored()).model_dump(mode="json")
        assert isinstance(dumped["created"], str)
        assert datetime.fromisoformat(dumped["created"]) == _CREATED

    def test_naive_created_treated_as_utc(self) -> None:
        naive = datetime(2025, 6, 1, 12, 0, 0)
        public = to_public_representation(_stored(created=naive))
        assert public.created.tzinfo is not None
        assert public.created == _CREATED

    def test_aware_created_kept(self) -> None:
        plus_two = datetime(2025, 6, 1, 14, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        public = to_public_representation(_stored(created=plus_two))
        assert public.created == _CREATED

    def test_does_not_mutate_input(self) -> None:
        doc = _stored()
        snapshot = {**doc, "author": dict(doc["author"])}
        to_public_representation(doc)
        assert doc == snapshot

    def test_stored_author_rendered_without_validation(self) -> None:
        doc = _stored(author={"firstName": "A", "lastName": "L" * 201})
        assert to_public_representation(doc).author == f"A {'L' * 201}"

    def test_stored_author_not_restripped(self) -> None:
        doc = _stored(author={"firstName": " Ada", "lastName": "Lovelace "})
        assert to_public_representation(doc).author == " Ada Lovelace "

    def test_returns_public_model(self) -> None:
        assert isinstance(to_public_representation(_stored()), PostPublic)
