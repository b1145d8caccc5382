"""Errors raised by the tiling pipeline.

Every failure is terminal for the invocation that raised it. The pipeline is
deterministic, so retrying with the same input cannot succeed.
"""


class TilerError(Exception):
    """Base class for all pipeline failures."""


class InvalidParameterError(TilerError, ValueError):
    """Parameters cannot produce a valid geometry, even after clamping."""


class DecodeFailure(TilerError):
    """Source bytes could not be decoded into a bitmap."""


class EncodeFailure(TilerError):
    """Output bitmap could not be serialized to the target format."""


class PipelineError(TilerError):
    """A pipeline stage failed for a reason outside the other categories."""

    def __init__(self, stage: str, message: str):
        super().__init__(f"{stage} failed: {message}")
        self.stage = stage
