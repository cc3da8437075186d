import pytest
from s3_public_proxy import ProxyConfig, S3Credentials
from s3_public_proxy.exceptions import ConfigurationError

SECRET_KEY = "EXAMPLE1234SECRET"


@pytest.fixture
def environ() -> dict[str, str]:
    return {
        "S3_ENDPOINT": "s3.us-west-2.amazonaws.com",
        "S3_BUCKET": "assets",
        "S3_ACCESS_KEY": "AKID123456",
        "S3_SECRET_KEY": SECRET_KEY,
    }


def test_from_environment(environ: dict[str, str]) -> None:
    environ["S3_REGION"] = "us-west-2"
    config = ProxyConfig.from_environment(environ)
    assert config == ProxyConfig(
        endpoint="s3.us-west-2.amazonaws.com",
        bucket="assets",
        credentials=S3Credentials(
            access_key_id="AKID123456",
            secret_access_key=SECRET_KEY,
            region="us-west-2",
        ),
    )
    assert config.credentials.service == "s3"


@pytest.mark.parametrize("region", [None, ""])
def test_region_defaults_to_us_east_1(
    environ: dict[str, str], region: str | None
) -> None:
    if region is not None:
        environ["S3_REGION"] = region
    config = ProxyConfig.from_environment(environ)
    assert config.credentials.region == "us-east-1"


def test_reads_os_environ(
    monkeypatch: pytest.MonkeyPatch, environ: dict[str, str]
) -> None:
    for name, value in environ.items():
        monkeypatch.setenv(name, value)
    monkeypatch.delenv("S3_REGION", raising=False)
    config = ProxyConfig.from_environment()
    assert config.bucket == "assets"


@pytest.mark.parametrize(
    "missing", ["S3_ENDPOINT", "S3_BUCKET", "S3_ACCESS_KEY", "S3_SECRET_KEY"]
)
def test_missing_required_variable(environ: dict[str, str], missing: str) -> None:
    del environ[missing]
    with pytest.raises(ConfigurationError, match=missing):
        ProxyConfig.from_environment(environ)


def test_empty_variables_are_missing(environ: dict[str, str]) -> None:
    environ["S3_ENDPOINT"] = ""
    environ["S3_ACCESS_KEY"] = ""
    with pytest.raises(ConfigurationError) as exc_info:
        ProxyConfig.from_environment(environ)
    assert "S3_ENDPOINT" in str(exc_info.value)
    assert "S3_ACCESS_KEY" in str(exc_info.value)
    assert "S3_BUCKET" not in str(exc_info.value)


def test_secret_never_in_repr(environ: dict[str, str]) -> None:
    config = ProxyConfig.from_environment(environ)
    assert SECRET_KEY not in repr(config)
    assert SECRET_KEY not in repr(config.credentials)
    assert "AKID123456" in repr(config.credentials)


def test_config_is_immutable(environ: dict[str, str]) -> None:
    config = ProxyConfig.from_environment(environ)
    with pytest.raises(AttributeError):
        config.bucket = "other"  # type: ignore
