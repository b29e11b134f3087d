import pytest

from registration.users.schemas import validate_user_payload


def fields(result):
    return {e["field"] for e in result.errors}


def test_valid_payload():
    result = validate_user_payload({"name": " Ada ", "email": "ada@x.com", "age": 20})

    assert result.ok
    assert result.value.name == "Ada"
    assert result.value.age == 20


def test_unknown_fields_are_ignored():
    result = validate_user_payload({"name": "Ada", "email": "ada@x.com", "age": 20, "userId": 99})

    assert result.ok
    assert not hasattr(result.value, "userId")


def test_missing_fields_are_reported():
    result = validate_user_payload({})

    assert not result.ok
    assert fields(result) == {"name", "email", "age"}


@pytest.mark.parametrize("name", ["", "   "])
def test_empty_name_is_rejected(name):
    result = validate_user_payload({"name": name, "email": "ada@x.com", "age": 20})

    assert not result.ok
    assert fields(result) == {"name"}


@pytest.mark.parametrize("age", ["abc", "20", 20.5, True, None])
def test_non_integer_age_is_rejected(age):
    result = validate_user_payload({"name": "Ada", "email": "ada@x.com", "age": age})

    assert not result.ok
    assert fields(result) == {"age"}


@pytest.mark.parametrize("payload", [None, [], "Ada", 3])
def test_body_must_be_an_object(payload):
    result = validate_user_payload(payload)

    assert not result.ok
    assert result.errors == [{"field": "body", "message": "Request body must be a JSON object"}]
