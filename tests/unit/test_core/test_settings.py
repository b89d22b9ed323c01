"""Tests for storage and logging settings."""

from pathlib import Path

from pydantic import ValidationError
import pytest

from object_storage.core.settings import (
    LoggingSettings,
    StorageDriver,
    StorageSettings,
    get_logging_settings,
    get_storage_settings,
)


class TestStorageSettings:
    """Test StorageSettings defaults and validation."""

    def test_defaults(self):
        settings = StorageSettings()

        assert settings.driver is StorageDriver.S3
        assert settings.region == "us-east-1"
        assert settings.bucket is None
        assert settings.acl == "public-read"
        assert settings.dedupe_listing is False
        assert settings.is_configured is False
        assert settings.is_default_region is True

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BUCKET", "media")
        monkeypatch.setenv("STORAGE_REGION", "eu-west-1")
        monkeypatch.setenv("STORAGE_DEDUPE_LISTING", "true")

        settings = StorageSettings()

        assert settings.bucket == "media"
        assert settings.region == "eu-west-1"
        assert settings.dedupe_listing is True
        assert settings.is_configured is True

    def test_blank_bucket_is_unset(self):
        assert StorageSettings(bucket="  ").is_configured is False

    def test_settings_are_frozen(self):
        settings = StorageSettings(bucket="media")

        with pytest.raises(ValidationError):
            settings.bucket = "other"

    def test_credentials_must_come_together(self):
        with pytest.raises(ValidationError, match="access_key and secret_key"):
            StorageSettings(bucket="b", access_key="only-one")

    def test_minio_requires_endpoint(self):
        with pytest.raises(ValidationError, match="minio"):
            StorageSettings(bucket="b", driver="minio")

    @pytest.mark.parametrize("field", ["retry_mode", "addressing_style"])
    def test_rejects_unknown_transport_modes(self, field):
        with pytest.raises(ValidationError):
            StorageSettings(**{field: "bogus"})

    def test_scaleway_api_endpoint_is_derived(self):
        settings = StorageSettings(bucket="b", driver="scaleway", region="fr-par")

        assert settings.api_endpoint == "https://s3.fr-par.scw.cloud"

    def test_explicit_endpoint_wins(self):
        settings = StorageSettings(bucket="b", endpoint="http://localhost:9000/")

        assert settings.api_endpoint == "http://localhost:9000"

    def test_boto3_config_without_credentials(self):
        config = StorageSettings(bucket="b", region="eu-west-1").get_boto3_config()

        assert config == {"region_name": "eu-west-1", "use_ssl": True, "verify": True}

    def test_yaml_conf_d_overrides(self, tmp_path, monkeypatch):
        conf = tmp_path / "conf"
        (conf / "storage.d").mkdir(parents=True)
        (conf / "storage.yaml").write_text("bucket: base\nregion: eu-west-1\n")
        (conf / "storage.d" / "10-local.yaml").write_text("bucket: override\n")
        monkeypatch.setenv("STORAGE_CONFIG_DIR", str(conf))

        settings = StorageSettings()

        assert settings.bucket == "override"
        assert settings.region == "eu-west-1"

    def test_cached_loader(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BUCKET", "cached")

        assert get_storage_settings() is get_storage_settings()
        assert get_storage_settings().bucket == "cached"


class TestLoggingSettings:
    """Test LoggingSettings."""

    def test_defaults(self):
        settings = LoggingSettings()

        assert settings.level == "INFO"
        assert settings.json_logs is False
        assert settings.effective_file_path is None
        assert settings.effective_console_level == "INFO"

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("LOG_JSON", "true")

        settings = get_logging_settings()

        assert settings.level == "DEBUG"
        assert settings.json_logs is True

    def test_file_path_only_when_enabled(self):
        settings = LoggingSettings(file_enabled=True, file_path=Path("out/app.jsonl"))

        assert settings.to_logging_kwargs()["file_path"] == "out/app.jsonl"
