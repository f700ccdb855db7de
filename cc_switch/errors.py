from pathlib import Path


class AppError(Exception):
    """Base user-facing application error."""


class ConfigurationError(AppError):
    """A configuration file or value is missing or unusable."""


class FileError(ConfigurationError):
    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class MissingConfigFileError(FileError):
    def __init__(self, path: Path) -> None:
        super().__init__(path=path, message="Missing required config file")


class InvalidJsonFormatError(FileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid JSON format ({detail})")


class InvalidTomlFormatError(FileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid TOML format ({detail})")


class InvalidConfigSchemaError(FileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid config schema ({detail})")


class FileIOError(AppError):
    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"I/O error ({detail}): {path}")


class SerializationError(AppError):
    def __init__(self, detail: str, path: Path | None = None) -> None:
        self.path = path
        self.detail = detail
        if path is None:
            super().__init__(f"Serialization failed ({detail})")
        else:
            super().__init__(f"Serialization failed ({detail}): {path}")


class InvalidInputError(AppError):
    """Caller supplied a value that violates a domain rule."""


class InvalidConfigurationError(InvalidInputError):
    def __init__(self, app: str, detail: str) -> None:
        self.app = app
        self.detail = detail
        super().__init__(f"Invalid {app} provider settings ({detail})")


class DuplicateEntityError(InvalidInputError):
    def __init__(self, kind: str, entity_id: str) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} already exists: {entity_id}")


class EntityNotFoundError(InvalidInputError):
    def __init__(self, kind: str, entity_id: str) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} not found: {entity_id}")


class ProviderNotFoundError(EntityNotFoundError):
    def __init__(self, provider_id: str) -> None:
        super().__init__(kind="Provider", entity_id=provider_id)


class ProviderIsCurrentError(AppError):
    def __init__(self, app: str, provider_id: str) -> None:
        self.app = app
        self.provider_id = provider_id
        super().__init__(
            f"Provider is current for {app} and cannot be deleted: {provider_id}"
        )


class LockError(AppError):
    """A shared resource lock could not be acquired."""


class DatabaseError(AppError):
    """The persistent store rejected a statement."""


class NoProvidersConfiguredError(AppError):
    def __init__(self, app: str) -> None:
        self.app = app
        super().__init__(f"No providers configured for {app}")


class AllProvidersCircuitOpenError(AppError):
    """Reserved for provider failover; never raised by the store or sync code."""
