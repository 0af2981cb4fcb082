"""Exceptions raised across the profiling package."""


class ProfilingError(Exception):
    """Base class for profiling errors."""


class SignalUnavailableError(ProfilingError):
    """An embedding or generative-model collaborator could not produce a signal."""


class PersistenceError(ProfilingError):
    """Profile state could not be written to the key-value store."""
