"""
Unit Tests for shared domain types, validators and exceptions
"""

import re

import pytest
from pydantic import BaseModel, ValidationError

from discord_jukebox.domain.shared.exceptions import (
    ConnectionTimeoutError,
    DomainError,
    InvalidStreamReferenceError,
    ResolutionFailure,
    VoiceConnectionError,
)
from discord_jukebox.domain.shared.messages import ErrorMessages
from discord_jukebox.domain.shared.types import DiscordSnowflake, HttpUrlStr, is_http_url
from discord_jukebox.domain.shared.validators import (
    validate_discord_snowflake,
    validate_skip_count,
)


class _Model(BaseModel):
    guild_id: DiscordSnowflake
    url: HttpUrlStr


# =============================================================================
# Types
# =============================================================================


class TestAnnotatedTypes:
    """Tests for the Annotated constraint types."""

    def test_valid_values(self):
        model = _Model(guild_id=1, url="https://example.com/a.webm")

        assert model.guild_id == 1

    @pytest.mark.parametrize("guild_id", [0, -5, 2**64])
    def test_snowflake_out_of_range(self, guild_id):
        with pytest.raises(ValidationError):
            _Model(guild_id=guild_id, url="https://example.com")

    def test_url_requires_http_scheme(self):
        with pytest.raises(ValidationError):
            _Model(guild_id=1, url="not-a-url")

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("http://a", True),
            ("https://a", True),
            ("ftp://a", False),
            ("not-a-url", False),
            ("", False),
            (None, False),
        ],
    )
    def test_is_http_url(self, value, expected):
        assert is_http_url(value) is expected


# =============================================================================
# Validators
# =============================================================================


class TestValidators:
    """Tests for the plain validator functions."""

    def test_snowflake_valid(self):
        assert validate_discord_snowflake(123456789012345678) == 123456789012345678

    def test_snowflake_non_positive(self):
        with pytest.raises(ValueError, match=re.escape(ErrorMessages.INVALID_SNOWFLAKE)):
            validate_discord_snowflake(0)

    def test_snowflake_too_large(self):
        with pytest.raises(ValueError, match=re.escape(ErrorMessages.SNOWFLAKE_TOO_LARGE)):
            validate_discord_snowflake(2**64)

    def test_skip_count(self):
        assert validate_skip_count(1) == 1

        with pytest.raises(ValueError):
            validate_skip_count(0)


# =============================================================================
# Exceptions
# =============================================================================


class TestExceptions:
    """Tests for the domain exception hierarchy."""

    def test_domain_error_default_code(self):
        error = DomainError("boom")

        assert error.message == "boom"
        assert error.code == "DomainError"
        assert str(error) == "boom"

    def test_invalid_stream_reference(self):
        error = InvalidStreamReferenceError("not-a-url")

        assert error.code == "INVALID_STREAM_REFERENCE"
        assert error.field == "stream_ref"
        assert "not-a-url" in error.message

    def test_resolution_failure_keeps_target(self):
        error = ResolutionFailure("ytsearch:song")

        assert error.target == "ytsearch:song"
        assert error.code == "RESOLUTION_FAILURE"

    def test_connection_timeout_is_voice_error(self):
        error = ConnectionTimeoutError(42, 5.0)

        assert isinstance(error, VoiceConnectionError)
        assert error.guild_id == 42
        assert error.timeout == 5.0
        assert error.code == "CONNECTION_TIMEOUT"
