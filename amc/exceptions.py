class AmcError(Exception):
    # base exception for all application-specific errors.
    pass

class ConfigError(AmcError):
    # errors related to configuration.
    pass

class DiscoveryError(AmcError):
    # errors during file discovery.
    pass

class PathResolutionError(DiscoveryError):
    # the scan root does not exist or cannot be canonicalized.
    pass

class OutputError(AmcError):
    # errors during output operations.
    pass

class GitError(AmcError):
    # errors from git commands.
    pass

class IgnoreFileLoadWarning(UserWarning):
    # an ignore file exists but could not be read or parsed; its rules are skipped.
    pass
