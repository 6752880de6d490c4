from __future__ import annotations


class SurveyCoreError(Exception):
    # Base class for domain errors raised by this package.
    pass


class ConditionParseError(SurveyCoreError):
    # Raised by the condition parser for text outside the grammar.
    # The evaluator catches it and treats the atom as false.
    pass


class UnknownEngineError(SurveyCoreError):
    # Raised when a logic engine version flag is not registered.
    pass


class SerializationError(SurveyCoreError):
    # Raised when an inbound dict cannot be mapped onto the model.
    pass
