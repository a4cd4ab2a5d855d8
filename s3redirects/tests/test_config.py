"""
Unit Tests: Configuration

Tests:
    - parallel parsing
    - RedirectsConfig.validate() ordering and messages
    - Environment loading
"""

import pytest

from s3redirects.core.config import RedirectsConfig, S3Config, parse_parallel
from s3redirects.core.errors import ConfigurationError, ErrorCode


def _config(build_path, **overrides):
    values = dict(
        build_path=str(build_path),
        redirects_source="redirects.json",
        bucket="docs-bucket",
        prefix="pr-123/run-1",
    )
    values.update(overrides)
    return RedirectsConfig(**values)


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "S3REDIRECTS_BUILD", "S3REDIRECTS_REDIRECTS", "S3REDIRECTS_BUCKET",
        "S3REDIRECTS_PREFIX", "S3REDIRECTS_PARALLEL", "S3REDIRECTS_FAIL_ON_KEY_COLLISION",
        "S3_REGION", "S3_ENDPOINT_URL", "S3_FORCE_PATH_STYLE", "S3_MAX_POOL_CONNECTIONS",
        "AWS_REGION", "AWS_DEFAULT_REGION", "AWS_ENDPOINT_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


# =============================================================================
# PARALLEL PARSING TESTS
# =============================================================================
class TestParseParallel:
    """Tests for parse_parallel."""

    @pytest.mark.parametrize("raw, expected", [("10", 10), (" 4 ", 4), (3, 3), ("-2", -2)])
    def test_integers(self, raw, expected):
        assert parse_parallel(raw) == expected

    @pytest.mark.parametrize("raw", ["", "abc", "1.5", "4.5", "4abc", "0x10", True, None])
    def test_invalid(self, raw):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_parallel(raw)
        assert exc_info.value.code is ErrorCode.CONFIG_INVALID_PARALLEL
        assert str(exc_info.value) == f"Invalid integer value for parallel, got {raw}"


# =============================================================================
# VALIDATION TESTS
# =============================================================================
class TestValidate:
    """Tests for RedirectsConfig.validate."""

    def test_valid(self, tmp_path):
        assert _config(tmp_path).validate().is_ok()

    def test_missing_build_dir(self, tmp_path):
        missing = tmp_path / "missing"
        result = _config(missing).validate()
        assert result.error.code is ErrorCode.CONFIG_INVALID_BUILD_PATH
        assert str(result.error) == f"Input build {missing} is not a readable directory."

    def test_invalid_bucket(self, tmp_path):
        result = _config(tmp_path, bucket="Bad_Bucket").validate()
        assert result.error.code is ErrorCode.CONFIG_INVALID_BUCKET
        assert str(result.error) == "Invalid bucket name, got Bad_Bucket"

    def test_invalid_prefix(self, tmp_path):
        result = _config(tmp_path, prefix="/docs/").validate()
        assert result.error.code is ErrorCode.CONFIG_INVALID_PREFIX
        assert str(result.error) == "Invalid prefix, got /docs/"

    @pytest.mark.parametrize("parallel", [0, -1])
    def test_non_positive_parallel(self, tmp_path, parallel):
        result = _config(tmp_path, parallel=parallel).validate()
        assert result.error.code is ErrorCode.CONFIG_INVALID_PARALLEL

    def test_first_failure_wins(self, tmp_path):
        result = _config(tmp_path / "missing", bucket="BAD", prefix="").validate()
        assert result.error.code is ErrorCode.CONFIG_INVALID_BUILD_PATH


# =============================================================================
# ENVIRONMENT TESTS
# =============================================================================
class TestFromEnv:
    """Tests for environment-based configuration."""

    def test_complete_env(self, clean_env, tmp_path):
        clean_env.setenv("S3REDIRECTS_BUILD", str(tmp_path))
        clean_env.setenv("S3REDIRECTS_REDIRECTS", "https://example.com/r.json")
        clean_env.setenv("S3REDIRECTS_BUCKET", "docs-bucket")
        clean_env.setenv("S3REDIRECTS_PREFIX", "docs")
        clean_env.setenv("S3REDIRECTS_PARALLEL", "4")
        clean_env.setenv("S3REDIRECTS_FAIL_ON_KEY_COLLISION", "true")
        clean_env.setenv("AWS_REGION", "eu-west-1")

        config = RedirectsConfig.from_env().unwrap()

        assert config.build_path == str(tmp_path)
        assert config.parallel == 4
        assert config.fail_on_key_collision is True
        assert config.s3.region == "eu-west-1"
        assert config.validate().is_ok()

    def test_defaults(self, clean_env):
        for name, value in (("BUILD", "b"), ("REDIRECTS", "r"), ("BUCKET", "bkt"), ("PREFIX", "p")):
            clean_env.setenv(f"S3REDIRECTS_{name}", value)

        config = RedirectsConfig.from_env().unwrap()

        assert config.parallel == 10
        assert config.fail_on_key_collision is False
        assert config.s3.region == "us-east-1"
        assert config.s3.force_path_style is True

    def test_missing_value(self, clean_env):
        clean_env.setenv("S3REDIRECTS_BUILD", "b")
        result = RedirectsConfig.from_env()
        assert result.error.code is ErrorCode.CONFIG_MISSING_VALUE
        assert result.error.context == {"name": "S3REDIRECTS_REDIRECTS"}

    def test_bad_parallel(self, clean_env):
        for name, value in (("BUILD", "b"), ("REDIRECTS", "r"), ("BUCKET", "bkt"), ("PREFIX", "p")):
            clean_env.setenv(f"S3REDIRECTS_{name}", value)
        clean_env.setenv("S3REDIRECTS_PARALLEL", "many")

        result = RedirectsConfig.from_env()

        assert result.error.code is ErrorCode.CONFIG_INVALID_PARALLEL

    def test_bad_pool_size(self, clean_env):
        for name, value in (("BUILD", "b"), ("REDIRECTS", "r"), ("BUCKET", "bkt"), ("PREFIX", "p")):
            clean_env.setenv(f"S3REDIRECTS_{name}", value)
        clean_env.setenv("S3_MAX_POOL_CONNECTIONS", "0")

        result = RedirectsConfig.from_env()

        assert result.error.code is ErrorCode.CONFIG_INVALID_VALUE


# =============================================================================
# S3 CONFIG TESTS
# =============================================================================
class TestS3Config:
    """Tests for S3Config."""

    def test_endpoint_from_env(self, clean_env):
        clean_env.setenv("S3_ENDPOINT_URL", "http://localhost:9000")
        clean_env.setenv("S3_FORCE_PATH_STYLE", "false")
        config = S3Config.from_env()
        assert config.endpoint_url == "http://localhost:9000"
        assert config.force_path_style is False

    def test_rejects_bad_pool(self):
        with pytest.raises(ValueError):
            S3Config(max_pool_connections=0)


# =============================================================================
# MAIN
# =============================================================================
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
