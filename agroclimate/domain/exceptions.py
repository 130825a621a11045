"""
Domain exceptions.
"""


class InvalidFarmContext(ValueError):
    """Farm is missing attributes an assessment cannot default."""

    status_code = 422

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NoWeatherDataAvailable(Exception):
    """Every weather provider failed; the synthetic series is used instead."""
    pass
