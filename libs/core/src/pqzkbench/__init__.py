from .errors import (
    BenchError,
    InvalidParameter,
    UnknownOperation,
    MalformedRequest,
    SamplingFailure,
    TransportFailure,
    MalformedResponse,
    BatchCancelled,
)
from .operations import Family, ParamSet, KemOperation, OperationIdentity, clamp_iterations
from .registry import kem_registry, circuit_registry
from .invoker import OperationInvoker, PreparedOperation
from .sampling import SampleRun, sample
from .stats import MeasurementStats, reduce, percentile
from .measurement import Measurement, run_measurement
from .metrics import AggregatedResult

__all__ = [
    "BenchError",
    "InvalidParameter",
    "UnknownOperation",
    "MalformedRequest",
    "SamplingFailure",
    "TransportFailure",
    "MalformedResponse",
    "BatchCancelled",
    "Family",
    "ParamSet",
    "KemOperation",
    "OperationIdentity",
    "clamp_iterations",
    "kem_registry",
    "circuit_registry",
    "OperationInvoker",
    "PreparedOperation",
    "SampleRun",
    "sample",
    "MeasurementStats",
    "reduce",
    "percentile",
    "Measurement",
    "run_measurement",
    "AggregatedResult",
]
