"""Application configuration.

AppConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass, field

from edgekit.cors import CORSConfig


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, json_indent=None)
    """

    debug: bool = False

    # CORS headers applied to every response, errors and preflight included
    cors: CORSConfig = field(default_factory=CORSConfig)

    # Response serialization (None = compact JSON)
    json_indent: int | None = 2

    # Limits
    max_content_length: int = 16 * 1024 * 1024  # 16 MB

