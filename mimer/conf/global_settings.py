from __future__ import annotations

import os
from types import UnionType
from typing import (
    Annotated,
    Any,
    ClassVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from mimer import __version__
from mimer.logging import LoggingConfig, StandardLoggingConfig
from mimer.types import Doc


def safe_get_type_hints(cls: type) -> dict[str, Any]:
    """
    Safely get type hints for a class, falling back to the raw annotations
    when they cannot be resolved.
    """
    try:
        return get_type_hints(cls, include_extras=True)
    except Exception:
        return dict(cls.__annotations__)


class BaseSettings:
    """
    Base of all the settings for mimer.

    Every annotated attribute can be overridden by an environment variable
    named after it, upper-cased and prefixed with `__env_prefix__`
    (e.g. `MIMER_LINE_LENGTH`). Values are cast to the annotated type.
    """

    __env_prefix__: ClassVar[str] = "MIMER_"
    __truthy__: ClassVar[set[str]] = {"true", "1", "yes", "on", "y"}

    def __init__(self, **kwargs: Any) -> None:
        cls = self.__class__
        if "__type_hints__" not in cls.__dict__:
            hints = safe_get_type_hints(cls)
            cls.__type_hints__ = {
                key: typ for key, typ in hints.items() if get_origin(typ) is not ClassVar
            }

        for key, value in kwargs.items():
            setattr(self, key, value)

        for key, typ in cls.__type_hints__.items():
            base_type = self._extract_base_type(typ)

            env_value = os.getenv(f"{self.__env_prefix__}{key.upper()}", None)
            if env_value is not None and key not in kwargs:
                value = self._cast(env_value, base_type)
            else:
                value = getattr(self, key, None)
            setattr(self, key, value)

        self.post_init()

    def post_init(self) -> None:
        """
        Called after all settings have been initialized. Subclasses override
        it to validate combinations of values.
        """
        ...

    def _extract_base_type(self, typ: Any) -> Any:
        origin = get_origin(typ)
        if origin is Annotated:
            return get_args(typ)[0]
        return typ

    def _cast(self, value: str, typ: Any) -> Any:
        """
        Casts an environment string to the given type.

        Raises:
            ValueError: If the value cannot be cast to the specified type.
        """
        try:
            origin = get_origin(typ)
            if origin is Union or origin is UnionType:
                non_none_types = [t for t in get_args(typ) if t is not type(None)]
                if len(non_none_types) != 1:
                    raise ValueError(f"Cannot cast to ambiguous Union type: {typ}")
                typ = non_none_types[0]

            if typ is bool:
                return value.lower() in self.__truthy__
            return typ(value)
        except Exception:
            type_name = getattr(typ, "__name__", str(typ))
            raise ValueError(f"Cannot cast value '{value}' to type '{type_name}'") from None

    def dict(self, exclude_none: bool = False, upper: bool = False) -> dict[str, Any]:
        """
        Dumps all the settings into a python dictionary.
        """
        result = {}
        for key in self.__class__.__type_hints__:
            value = getattr(self, key, None)
            if exclude_none and value is None:
                continue
            result[key.upper() if upper else key] = value
        return result


class Settings(BaseSettings):
    version: Annotated[
        str,
        Doc(
            """
            The version of mimer the settings were written for.
            """
        ),
    ] = __version__
    line_length: Annotated[
        int,
        Doc(
            """
            Maximum length of a base64 encoded line, without the trailing CRLF.

            RFC 2045 caps encoded lines at 76 characters. The value must be a
            multiple of 4 so every line decodes to whole bytes.
            """
        ),
    ] = 76
    chunk_size: Annotated[
        int,
        Doc(
            """
            Number of bytes requested from an attachment source per read.

            Only one chunk (plus less than one encoded line of remainder) is
            held in memory at a time, whatever the size of the attachment.
            """
        ),
    ] = 57 * 1024
    default_content_type: Annotated[
        str,
        Doc(
            """
            The `Content-Type` used for attachments whose filename extension
            does not map to a known media type.
            """
        ),
    ] = "application/octet-stream"
    write_bcc_header: Annotated[
        bool,
        Doc(
            """
            Default for `MessageBuilder.write_bcc_header()`.

            Email APIs such as Amazon SES need the `BCC:` header in the body.
            SMTP relays may forward it to every recipient, exposing the blind
            copies, so it is off by default.
            """
        ),
    ] = False
    logging_level: Annotated[
        str,
        Doc(
            """
            The logging level used by the default `StandardLoggingConfig`.
            """
        ),
    ] = "INFO"

    def post_init(self) -> None:
        if self.line_length % 4 != 0 or not 4 <= self.line_length <= 76:
            raise ValueError(
                f"line_length must be a multiple of 4 between 4 and 76, got {self.line_length}."
            )
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}.")

    @property
    def logging_config(self) -> LoggingConfig | None:
        """
        The logging configuration applied by `mimer.logging.setup_logging()`.

        **Example**

        ```python
        from mimer.conf.global_settings import Settings


        class AppSettings(Settings):
            @property
            def logging_config(self) -> LoggingConfig:
                return StandardLoggingConfig(level="WARNING")
        ```
        """
        return StandardLoggingConfig(level=self.logging_level)
