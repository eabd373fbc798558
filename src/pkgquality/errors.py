"""Exception hierarchy for pkgquality.

QualityError is the root. Soft failures never surface as exceptions from the
pipeline; only the hard failures below reach the caller of ``estimate``.
"""


class QualityError(Exception):
    """Root exception for the project."""


class ConfigError(QualityError):
    """Invalid configuration values."""


class InvalidEntryError(QualityError):
    """The package entry is missing or has no name."""


class MalformedResponseError(QualityError):
    """An upstream answered with a body that is not valid JSON."""

    def __init__(self, source: str, url: str, detail: str) -> None:
        self.source = source
        self.url = url
        self.detail = detail
        super().__init__(f"Could not parse {source} response from {url}: {detail}")


class PackageNotFoundError(QualityError):
    """Raised when a package cannot be found in the registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Package '{name}' not found in the registry")
