"""Exceptions raised inside the normalization pipeline."""


class ContentNormalizationError(Exception):
    """Base class for normalization failures."""


class TransformationError(ContentNormalizationError):
    """A transformer could not build a record from otherwise supported input."""

    def __init__(self, raw_id: str, message: str):
        self.raw_id = raw_id
        super().__init__(f"{raw_id}: {message}")
