class ConfigurationError(AssertionError):
    pass

class InvalidLoggerError(ConfigurationError):
    pass

class InvalidExitCodeError(ConfigurationError):
    def __init__(self, exit_code: object):
        self.exit_code = exit_code
        super().__init__(f"Error exit code must be a positive integer, got {exit_code!r}")

class InvalidHandlerError(ConfigurationError):
    pass

class HandlerAlreadyRegisteredError(ConfigurationError):
    pass

class UnknownEventError(ConfigurationError):
    def __init__(self, event: object):
        self.event = event
        super().__init__(f"Unknown exit event: {event!r}")
