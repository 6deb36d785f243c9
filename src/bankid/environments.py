"""The two BankID deployment targets."""

from __future__ import annotations

from enum import Enum

from bankid.types import EnvironmentProfile

PRODUCTION = EnvironmentProfile(
    name="production",
    api_url="https://appapi.bankid.com/rp/v4",
    wsdl_url="https://appapi.bankid.com/rp/v4?wsdl",
    trust_anchor="appapi.bankid.com.pem",
    peer_name="BankID SSL Root Certification Authority",
)

TEST = EnvironmentProfile(
    name="test",
    api_url="https://appapi.test.bankid.com/rp/v4",
    wsdl_url="https://appapi.test.bankid.com/rp/v4?wsdl",
    trust_anchor="appapi.test.bankid.com.pem",
    peer_name="BankID SSL Root Certification Authority TEST",
)


class Environment(Enum):
    PRODUCTION = PRODUCTION
    TEST = TEST

    @property
    def profile(self) -> EnvironmentProfile:
        return self.value

    @classmethod
    def from_flag(cls, test: bool) -> "Environment":
        return cls.TEST if test else cls.PRODUCTION


def resolve_environment(
    test: bool = False,
    environment: Environment | str | None = None,
) -> Environment:
    if environment is None:
        return Environment.from_flag(test)
    if isinstance(environment, Environment):
        return environment
    if isinstance(environment, str):
        name = environment.strip().lower()
        for member in Environment:
            if member.profile.name == name:
                return member
    raise ValueError(f"Unknown BankID environment: {environment!r}. Use 'production' or 'test'.")
