# Custom exceptions for typeshape

class TypeShapeError(Exception):
    """Base exception for all application-specific errors."""
    pass


class MalformedGraphError(TypeShapeError):
    """Raised when the renderer reaches a node that cannot be keyed by type name."""
    def __init__(self, member_name: str, message: str):
        self.member_name = member_name
        self.message = message
        super().__init__(f"Malformed member graph at '{member_name}': {message}")


class TargetResolutionError(TypeShapeError):
    """Raised when a target string cannot be located, loaded or evaluated."""
    def __init__(self, target: str, message: str):
        self.target = target
        self.message = message
        super().__init__(f"Cannot resolve '{target}': {message}")


class ConfigError(TypeShapeError):
    """Raised for configuration-related problems."""
    pass
