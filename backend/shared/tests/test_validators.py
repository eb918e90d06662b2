import pytest

from shared.validators import parse_cors_origins


class TestParseCorsOrigins:
    def test_json_array_string(self):
        assert parse_cors_origins('["http://a.com","https://b.com"]') == ["http://a.com", "https://b.com"]

    def test_comma_separated_with_whitespace(self):
        assert parse_cors_origins("http://a.com , http://b.com") == ["http://a.com", "http://b.com"]

    def test_comma_separated_skips_empty_segments(self):
        assert parse_cors_origins("http://a.com,,http://b.com,") == ["http://a.com", "http://b.com"]

    def test_passthrough_list(self):
        assert parse_cors_origins(["http://a.com"]) == ["http://a.com"]

    def test_wildcard_allowed(self):
        assert parse_cors_origins("*") == ["*"]

    def test_trailing_slash_stripped(self):
        assert parse_cors_origins("http://a.com/") == ["http://a.com"]

    @pytest.mark.parametrize("value", ["", ",", ",,,", "[]", []])
    def test_empty_raises(self, value):
        with pytest.raises(ValueError, match="must not be empty"):
            parse_cors_origins(value)

    def test_invalid_json_raises(self):
        with pytest.raises(ValueError, match="Invalid JSON array"):
            parse_cors_origins("[not valid json")

    def test_json_mixed_types_raises(self):
        with pytest.raises(ValueError, match="must be an array of strings"):
            parse_cors_origins('["http://a.com", 123]')

    def test_origin_without_scheme_raises(self):
        with pytest.raises(ValueError, match="must be"):
            parse_cors_origins("a.com")
