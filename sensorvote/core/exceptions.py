"""
Custom exceptions for SENSORVOTE.

Provides specific exception types for different error scenarios,
enabling better error handling and debugging.
"""


class SensorVoteError(Exception):
    """Base exception for all SENSORVOTE errors"""
    pass


class InvalidInputError(SensorVoteError):
    """Raised when ensemble inputs are malformed or inconsistent"""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Invalid input for '{field}': {message}")


class DegenerateWeightsError(SensorVoteError):
    """Raised when classifier weights cannot be normalized"""

    def __init__(self, total: float):
        self.total = total
        super().__init__(
            f"Cannot derive weights: accuracies sum to {total}, must be positive"
        )


class DataLoadError(SensorVoteError):
    """Raised when a dataset cannot be loaded or cleaned"""

    def __init__(self, source: str, message: str, original_error: Exception = None):
        self.source = source
        self.original_error = original_error
        super().__init__(f"Failed to load {source}: {message}")


class TrainingError(SensorVoteError):
    """Raised when fitting or applying a classifier fails"""

    def __init__(self, classifier_id: str, message: str, original_error: Exception = None):
        self.classifier_id = classifier_id
        self.original_error = original_error
        super().__init__(f"Training failed for {classifier_id}: {message}")


class ConfigurationError(SensorVoteError):
    """Raised when configuration is invalid"""

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(f"Configuration error for '{key}': {message}")


class ModelNotFoundError(SensorVoteError):
    """Raised when a required model is not found"""

    def __init__(self, model_name: str):
        self.model_name = model_name
        super().__init__(f"Model not found: {model_name}")
