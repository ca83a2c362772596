"""Tests for core entities and the error taxonomy."""

import pytest

from fluxql import (
    ActionConstants,
    AdapterOptions,
    ApiError,
    AppConfig,
    ConfigurationError,
    ErrorKind,
    InvalidSessionError,
    NetworkError,
    Operation,
    OperationKind,
    OperationVariable,
    Session,
    SessionInvalidated,
    SessionStatus,
    ValidationError,
)

NOW = 1_700_000_000_000
MINUTE = 60_000


class TestOperation:
    """Tests for Operation."""

    def test_create_from_loose_mapping(self) -> None:
        operation = Operation.create(
            "mutation",
            "users",
            "signIn",
            {
                "username": {"type": "String!", "value": "testuser"},
                "expires": ("Int", 15),
            },
            ["token"],
        )

        assert operation.kind is OperationKind.MUTATION
        assert operation.variables == (
            OperationVariable("username", "String!", "testuser"),
            OperationVariable("expires", "Int", 15),
        )
        assert operation.return_fields == ("token",)
        assert operation.variable_values == {"username": "testuser", "expires": 15}

    def test_duplicate_variable_names_rejected(self) -> None:
        with pytest.raises(ValueError, match="tagId"):
            Operation(
                OperationKind.QUERY,
                "tags",
                "itemById",
                (OperationVariable("tagId", "ID!", "1"), OperationVariable("tagId", "ID!", "2")),
            )

    def test_shape_ignores_values(self) -> None:
        first = Operation.create("query", "tags", "itemById", {"tagId": ("ID!", "1")}, ["id"])
        second = Operation.create("query", "tags", "itemById", {"tagId": ("ID!", "2")}, ["id"])

        assert first.shape == second.shape
        assert first != second

    def test_operation_is_immutable(self) -> None:
        operation = Operation.create("query", "tags", "list")

        with pytest.raises(AttributeError):
            operation.collection_name = "posts"  # type: ignore[misc]


class TestSession:
    """Tests for Session."""

    def test_token_and_expires_required_together(self) -> None:
        with pytest.raises(ValueError):
            Session(token="abc")

        with pytest.raises(ValueError):
            Session(expires=NOW)

    def test_from_dict_collapses_partial_payload(self) -> None:
        assert Session.from_dict({"token": "abc"}).is_empty
        assert Session.from_dict(None).is_empty
        assert Session.from_dict({}).to_dict() == {}

    def test_round_trip_store_shape(self) -> None:
        data = {
            "expires": NOW + 15 * MINUTE,
            "issued": NOW,
            "token": "abc",
            "userId": "user-1",
            "username": "testuser",
        }

        session = Session.from_dict(data)

        assert session.user_id == "user-1"
        assert session.to_dict() == data

    @pytest.mark.parametrize(
        ("minutes_left", "expected"),
        [
            (30, SessionStatus.ACTIVE),
            (5.01, SessionStatus.ACTIVE),
            (5, SessionStatus.NEAR_EXPIRY),
            (1, SessionStatus.NEAR_EXPIRY),
            (-3, SessionStatus.NEAR_EXPIRY),
        ],
    )
    def test_status_measured_against_expires(
        self, minutes_left: float, expected: SessionStatus
    ) -> None:
        session = Session(token="abc", issued=NOW - 60 * MINUTE, expires=int(NOW + minutes_left * MINUTE))

        assert session.status(min_minutes=5, now=NOW) is expected

    def test_empty_session_is_absent(self) -> None:
        assert Session().status(5, now=NOW) is SessionStatus.ABSENT

    def test_merge_keeps_identity(self) -> None:
        current = Session(token="old", issued=NOW, expires=NOW + MINUTE, user_id="user-1", username="testuser")
        refreshed = Session(token="new", expires=NOW + 15 * MINUTE)

        merged = current.merge(refreshed)

        assert merged.token == "new"
        assert merged.expires == NOW + 15 * MINUTE
        assert merged.issued == NOW
        assert merged.username == "testuser"


class TestAdapterOptions:
    """Tests for AdapterOptions."""

    def test_merge_overrides_only_set_fields(self) -> None:
        base = AdapterOptions(strict=True, environment="test")

        merged = base.merge({"allowPartial": True})

        assert merged.strict is True
        assert merged.allow_partial is True
        assert merged.environment == "test"
        assert base.allow_partial is None

    def test_extra_keys_are_kept(self) -> None:
        options = AdapterOptions.coerce({"strict": False, "locale": "en"})

        assert options.strict is False
        assert options.get("locale") == "en"
        assert options.merge({"locale": "fr"}).get("locale") == "fr"

    def test_get_accepts_camel_case(self) -> None:
        check = lambda value: value  # noqa: E731
        options = AdapterOptions(custom_validation=check)

        assert options.get("customValidation") is check
        assert options.get("allowPartial", False) is False


class TestActionConstants:
    """Tests for ActionConstants."""

    def test_for_entity(self) -> None:
        constants = ActionConstants.for_entity("tag")

        assert constants.prefix == "TAG"
        assert constants.ADD_ITEM_SUCCESS == "TAG_ADD_ITEM_SUCCESS"
        assert constants.REMOVE_ITEM_ERROR == "TAG_REMOVE_ITEM_ERROR"
        assert constants.GET_LIST_SUCCESS == "TAG_GET_LIST_SUCCESS"


class TestAppConfig:
    """Tests for AppConfig."""

    def test_from_store_shape(self) -> None:
        config = AppConfig.from_dict(
            {
                "app": {
                    "api": {"url": "http://a/app", "public": "http://a/public", "uploadImage": "http://a/up"},
                    "session": {"minMinutes": 2},
                },
                "environment": "development",
            }
        )

        assert config.api.upload_image == "http://a/up"
        assert config.session.min_minutes == 2
        assert config.session.max_minutes == 15
        assert config.environment == "development"
        assert AppConfig.from_dict(config.to_dict()) == config

    def test_missing_endpoint_raises(self) -> None:
        config = AppConfig.from_dict({"app": {"api": {}}})

        with pytest.raises(ConfigurationError, match="app.api.public"):
            config.api.require("public")


class TestErrors:
    """Tests for the error taxonomy."""

    def test_classifies_network_error(self) -> None:
        error = ApiError.from_messages(["network_error"])

        assert isinstance(error, NetworkError)
        assert error.kind is ErrorKind.NETWORK

    def test_classifies_invalid_session(self) -> None:
        error = ApiError.from_response([{"message": "invalid_session"}])

        assert isinstance(error, InvalidSessionError)
        assert error.errors == ["invalid_session"]

    def test_other_errors_stay_plain(self) -> None:
        error = ApiError.from_messages(["Invalid password"])

        assert type(error) is ApiError
        assert str(error) == "Invalid password"

    def test_validation_error_message(self) -> None:
        error = ValidationError("tag.name", "Field required")

        assert str(error) == "tag.name: Field required"
        assert error.field == "tag.name"
        assert error.kind is ErrorKind.VALIDATION

    def test_session_invalidated_equals_empty_dict(self) -> None:
        result = SessionInvalidated()

        assert result == {}
        assert not result
        assert result.kind is ErrorKind.INVALID_SESSION
