# bmi_api/errors.py


class BmiError(Exception):
    """Base class for errors raised by the assessment pipeline."""


class InvalidMeasurement(BmiError, ValueError):
    """Input fields failed validation or produced a non-finite / non-positive BMI."""


class AdviceUnavailable(BmiError, RuntimeError):
    """The advice collaborator failed or returned no usable advice text."""
