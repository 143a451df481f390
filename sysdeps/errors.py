"""Error kinds raised or collected while resolving system dependencies."""


class SysDepsError(Exception):
    """Base class for every sysdeps error."""


class InvalidVersion(SysDepsError):
    def __init__(self, text, reason="expected dot-separated non-negative integers", dependency=None):
        self.text = text
        self.reason = reason
        self.dependency = dependency
        message = f"Invalid version '{text}': {reason}"
        if dependency:
            message = f"{dependency}: {message}"
        super().__init__(message)


class InvalidSpec(SysDepsError):
    def __init__(self, key, message):
        self.key = key
        self.message = message
        super().__init__(f"tool.system-deps.{key}: {message}")


class ManifestError(SysDepsError):
    """The manifest could not be read or has no usable system-deps table."""


class InvalidOverride(SysDepsError):
    def __init__(self, dependency, raw_value, reason=""):
        self.dependency = dependency
        self.raw_value = raw_value
        self.reason = reason
        message = f"{dependency}: invalid override value {raw_value!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class NotFound(SysDepsError):
    def __init__(self, dependency, lookup_name):
        self.dependency = dependency
        self.lookup_name = lookup_name
        super().__init__(f"{dependency}: library '{lookup_name}' was not found by the discovery tool")


class VersionTooLow(SysDepsError):
    def __init__(self, dependency, required, found):
        self.dependency = dependency
        self.required = required
        self.found = found
        super().__init__(f"{dependency}: version {required} or newer is required, but {found} was found")


class BuildInternalFailed(SysDepsError):
    def __init__(self, dependency, reason):
        self.dependency = dependency
        self.reason = reason
        super().__init__(f"{dependency}: internal build failed: {reason}")


class ToolInvocationFailed(SysDepsError):
    def __init__(self, command, reason):
        self.command = command
        self.reason = reason
        super().__init__(f"Could not run '{command}': {reason}")


class ProbeFailed(SysDepsError):
    """Every dependency failure collected during a single probe run."""

    def __init__(self, failures):
        self.failures = list(failures)
        lines = [f"{len(self.failures)} system dependenc{'y' if len(self.failures) == 1 else 'ies'} could not be resolved:"]
        lines.extend(f"  - {failure}" for failure in self.failures)
        super().__init__("\n".join(lines))
