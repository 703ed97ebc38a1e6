"""Validation pipeline tests — rules, ordering, caption derivation."""

import pytest

from photo_api.validation import (
    MISSING,
    PHOTO_RULES,
    PhotoValidationError,
    collect_violations,
    derive_caption,
    is_url,
    validate_new_photo,
)

VALID = {"title": "Buat photo baru", "image_url": "http://image.com/createphoto.png"}


def test_valid_input_has_no_violations():
    assert collect_violations(VALID) == []


def test_all_violations_collected_in_declaration_order():
    assert collect_violations({}) == [
        "Title cannot be omitted",
        "Image URL cannot be omitted",
    ]
    assert collect_violations({"title": "", "image_url": ""}) == [
        "Title cannot be an empty string",
        "Image URL cannot be an empty string",
    ]


def test_none_counts_as_omitted():
    assert collect_violations({"title": None, "image_url": VALID["image_url"]}) == [
        "Title cannot be omitted",
    ]


def test_type_violations_collected_with_the_rest():
    assert collect_violations({"title": 123}) == [
        "Title must be a string",
        "Image URL cannot be omitted",
    ]
    assert collect_violations({"title": "ok", "image_url": 5}) == [
        "Image URL must be a string",
    ]


def test_whitespace_title_is_not_empty():
    assert collect_violations({**VALID, "title": "   "}) == []


@pytest.mark.parametrize(
    "url,ok",
    [
        ("http://image.com/createphoto.png", True),
        ("https://cdn.example.org/a/b.jpg?size=large", True),
        ("wrongformatimage", False),
        ("image.com/photo.png", False),
        ("http://", False),
        (MISSING, True),
        ("", True),
        (123, True),
        ("ftp://files.example.com/x.png", False),
    ],
)
def test_is_url(url, ok):
    assert is_url(url) is ok


def test_rules_are_explicit_tuples():
    assert [(r.field, r.message) for r in PHOTO_RULES] == [
        ("title", "Title cannot be omitted"),
        ("title", "Title must be a string"),
        ("title", "Title cannot be an empty string"),
        ("image_url", "Image URL cannot be omitted"),
        ("image_url", "Image URL must be a string"),
        ("image_url", "Image URL cannot be an empty string"),
        ("image_url", "Wrong URL format"),
    ]


def test_derive_caption():
    assert derive_caption(VALID["title"], VALID["image_url"]) == (
        "BUAT PHOTO BARU http://image.com/createphoto.png"
    )


def test_validate_new_photo_stamps_owner_and_caption():
    values = validate_new_photo({**VALID, "caption": "ignored", "user_id": 42}, owner_id=1)
    assert values == {
        "title": VALID["title"],
        "image_url": VALID["image_url"],
        "caption": "BUAT PHOTO BARU http://image.com/createphoto.png",
        "user_id": 1,
    }


def test_validate_new_photo_raises_with_messages():
    with pytest.raises(PhotoValidationError) as exc_info:
        validate_new_photo({"image_url": "wrongformatimage"}, owner_id=1)
    assert exc_info.value.messages == [
        "Title cannot be omitted",
        "Wrong URL format",
    ]
