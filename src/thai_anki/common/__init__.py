from .errors import (
    ConfigurationError,
    DictionaryNotReadyError,
    ExtractionError,
    LookupFailure,
    MissingFilenameError,
    SerializationError,
    ThaiAnkiError,
    UnsupportedFileTypeError,
)
from .logging_config import setup_logging, get_logger
from .reliability import async_retry_invoke
