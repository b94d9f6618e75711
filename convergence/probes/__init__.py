from .outcome import (
    ProbeNegative as ProbeNegative,
    ProbeOutcome as ProbeOutcome,
    ProbeTransportError as ProbeTransportError,
    ProbeValue as ProbeValue,
    describe_outcome as describe_outcome,
)
from .probe import (
    FunctionProbe as FunctionProbe,
    HTTPProbe as HTTPProbe,
    HTTPRequest as HTTPRequest,
    Probe as Probe,
    RemoteCallProbe as RemoteCallProbe,
    interpret_defined_result as interpret_defined_result,
    interpret_success_status as interpret_success_status,
)
