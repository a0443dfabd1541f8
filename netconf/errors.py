class NetConfError(Exception):
    pass


class UsageError(NetConfError):
    pass


class UnsupportedSystem(NetConfError):
    pass


class InterfaceNotFound(NetConfError):
    pass


class ToolUnavailable(NetConfError):
    pass


class InvalidInput(NetConfError):
    pass
