# runner/errors.py
class IntrospectionError(Exception):
    kind = "internal_error"
    retryable = False

    def to_response(self) -> dict:
        return {"error": str(self), "kind": self.kind, "retryable": self.retryable}

class NoRegistry(IntrospectionError):
    kind = "no_registry"

class NoTopology(IntrospectionError):
    kind = "no_topology"

class ElementNotFound(IntrospectionError):
    kind = "element_not_found"

class InvalidElementGeometry(IntrospectionError):
    kind = "invalid_element_geometry"

class DepthLimitExceeded(IntrospectionError):
    kind = "depth_limit_exceeded"

class HostTimeout(IntrospectionError):
    kind = "host_timeout"
    retryable = True

class InvalidParameters(IntrospectionError):
    kind = "invalid_parameters"

class UnknownCommand(IntrospectionError):
    kind = "unknown_command"

class InputDispatchError(IntrospectionError):
    kind = "input_dispatch_failed"

class ScreenshotError(IntrospectionError):
    kind = "screenshot_failed"
