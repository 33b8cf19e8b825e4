"""
Settings Registry - Errors.
"""


class RegistryError(Exception):
    """Base settings registry error."""
    pass


class InvalidArgumentsError(RegistryError):
    """A declaration was called with missing or ambiguous arguments."""
    def __init__(self, operation: str, setting_id: str = ""):
        self.operation = operation
        self.setting_id = setting_id
        super().__init__(f"Invalid arguments for {operation}: {setting_id!r}")


class EnterpriseSettingError(RegistryError):
    """Enterprise setting declared without an invalid value."""
    def __init__(self, setting_id: str):
        self.setting_id = setting_id
        super().__init__(f"Enterprise setting {setting_id} is missing the invalid_value option")


class SettingValidationError(RegistryError):
    """A value does not match the declared setting type."""
    def __init__(self, setting_id: str, message: str):
        self.setting_id = setting_id
        super().__init__(f"Value for setting {setting_id} {message}")


class StorageError(RegistryError):
    """Persistent settings collection failure."""
    pass


class DuplicateSettingError(StorageError):
    """A document with this id already exists."""
    def __init__(self, setting_id: str):
        self.setting_id = setting_id
        super().__init__(f"Setting already exists: {setting_id}")
