from __future__ import annotations


class BoostError(Exception):
    code = "boost_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigError(BoostError):
    code = "config_error"
