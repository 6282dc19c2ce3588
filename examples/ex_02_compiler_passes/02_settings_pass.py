"""Compiler passes: expose pydantic settings as container parameters.

``SettingsParametersPass`` reads the settings class from the environment at
compile time and publishes its fields under a prefix.
"""

from __future__ import annotations

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from dicompose import Container
from dicompose.integrations.pydantic_settings import SettingsParametersPass


class MailSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="EXAMPLE_MAIL_")

    sender: str = "noreply@example.org"
    retries: int = 3


class Mailer:
    def __init__(self, sender: str, retries: int) -> None:
        self.sender = sender
        self.retries = retries


def main() -> None:
    os.environ["EXAMPLE_MAIL_SENDER"] = "ops@example.org"

    container = Container()
    container.add_compiler_pass(SettingsParametersPass(MailSettings, prefix="mail"))
    container.register("mailer", Mailer, "%mail.sender%", "%mail.retries%")

    mailer = container.get("mailer")

    print(f"sender={mailer.sender}")  # => sender=ops@example.org
    print(f"retries={mailer.retries}")  # => retries=3


if __name__ == "__main__":
    main()
