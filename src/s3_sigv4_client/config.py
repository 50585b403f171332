import configparser
import dataclasses
import os
import pathlib
from collections.abc import Mapping
from typing import Self

from yarl import URL

from .exceptions import ConfigError

DEFAULT_TIMEOUT = 60.0


@dataclasses.dataclass(frozen=True)
class ClientConfig:
    """Connection settings for one bucket on an S3-compatible endpoint.

    Validated on construction; build a new instance with
    :func:`dataclasses.replace` to change a value.
    """

    endpoint: str
    bucket: str
    access_key: str = dataclasses.field(repr=False)
    secret_key: str = dataclasses.field(repr=False)
    trust_cert_path: pathlib.Path | None = None
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self):
        try:
            endpoint = URL(self.endpoint)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid endpoint URL {self.endpoint!r}: {e}") from e
        if endpoint.scheme not in ("http", "https") or not endpoint.host:
            raise ConfigError(
                f"Invalid endpoint URL {self.endpoint!r}. "
                "Must be an http:// or https:// URL with a host."
            )
        # normalize so that path joins never produce "//"
        object.__setattr__(self, "endpoint", str(endpoint).rstrip("/"))

        bucket = self.bucket.strip("/") if self.bucket else ""
        if not bucket or "/" in bucket:
            raise ConfigError(f"Invalid bucket name {self.bucket!r}")
        object.__setattr__(self, "bucket", bucket)

        if not self.access_key:
            raise ConfigError("access key must not be empty")
        if not self.secret_key:
            raise ConfigError("secret key must not be empty")

        if self.trust_cert_path is not None:
            path = pathlib.Path(self.trust_cert_path)
            if not path.is_file():
                raise ConfigError(f"Trusted certificate file not found: {path}")
            object.__setattr__(self, "trust_cert_path", path)

        try:
            timeout = float(self.timeout)
        except (TypeError, ValueError):
            raise ConfigError(f"Invalid timeout {self.timeout!r}") from None
        if timeout <= 0:
            raise ConfigError(f"Timeout must be positive, got {timeout}")
        object.__setattr__(self, "timeout", timeout)

    @property
    def bucket_url(self) -> URL:
        return URL(self.endpoint) / self.bucket

    @classmethod
    def from_file(
        cls,
        config_path: str | pathlib.Path,
        profile_name: str = "default",
    ) -> Self:
        config_path = pathlib.Path(config_path)
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")

        # secrets may contain "%"
        parser = configparser.ConfigParser(interpolation=None)
        try:
            parser.read(config_path)
        except configparser.Error as e:
            raise ConfigError(f"Cannot parse config file {config_path}: {e}") from e

        # "profile <name>" like the AWS config file, plain "<name>" also works
        for section in (f"profile {profile_name}", profile_name):
            if section in parser:
                data = dict(parser[section])
                break
        else:
            raise ConfigError(f"Profile '{profile_name}' not found in {config_path}")

        return cls._from_mapping(
            data,
            keys={
                "endpoint": "endpoint",
                "bucket": "bucket",
                "access_key": "aws_access_key_id",
                "secret_key": "aws_secret_access_key",
                "trust_cert_path": "trust_cert_path",
                "timeout": "timeout",
            },
            source=f"profile '{profile_name}' in {config_path}",
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Self:
        if environ is None:
            environ = os.environ
        return cls._from_mapping(
            environ,
            keys={
                "endpoint": "S3_ENDPOINT",
                "bucket": "S3_BUCKET",
                "access_key": "AWS_ACCESS_KEY_ID",
                "secret_key": "AWS_SECRET_ACCESS_KEY",
                "trust_cert_path": "S3_TRUST_CERT_PATH",
                "timeout": "S3_TIMEOUT",
            },
            source="environment",
        )

    @classmethod
    def _from_mapping(
        cls, data: Mapping[str, str], keys: dict[str, str], source: str
    ) -> Self:
        values = {}
        for field_name in ("endpoint", "bucket", "access_key", "secret_key"):
            value = data.get(keys[field_name])
            if not value:
                raise ConfigError(f"{keys[field_name]} not found in {source}")
            values[field_name] = value

        trust_cert_path = data.get(keys["trust_cert_path"])
        if trust_cert_path:
            values["trust_cert_path"] = pathlib.Path(trust_cert_path).expanduser()

        timeout = data.get(keys["timeout"])
        if timeout:
            values["timeout"] = timeout

        return cls(**values)
