"""Multipart form data — parsed once per request, shared by every consumer.

``python-multipart`` drives the parse. The resulting ``FormData`` keeps
string fields and uploaded files apart, both in submission order, and
offers the three views the request context exposes:

- ``files``: ordered ``(field name, UploadFile)`` pairs
- ``fields()``: non-file ``name -> value`` mapping
- ``to_dict()``: fields and files merged, the body-schema input
"""

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema
from python_multipart.multipart import MultipartParser, parse_options_header

from edgekit._internal.multimap import MultiMap


@dataclass(frozen=True, slots=True)
class UploadFile:
    """An uploaded file from a multipart form submission.

    Immutable metadata with the content held in memory (suitable for
    the request sizes an edge handler accepts).
    """

    filename: str
    content_type: str
    size: int
    _content: bytes

    @property
    def name(self) -> str:
        """Alias for ``filename``."""
        return self.filename

    async def read(self) -> bytes:
        """Return the file content as bytes."""
        return self._content

    async def save(self, path: Path) -> None:
        """Write the file content to disk.

        Args:
            path: Destination file path. Parent directories must exist.
        """
        path.write_bytes(self._content)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        # Accept UploadFile instances as-is; serialize to the filename.
        return core_schema.is_instance_schema(
            cls,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda upload: upload.filename
            ),
        )

    def __repr__(self) -> str:
        return f"UploadFile({self.filename!r}, {self.content_type!r}, {self.size} bytes)"


class FormData(MultiMap):
    """Immutable parsed multipart form.

    The mapping interface covers string fields only; uploaded files live
    in ``files``. Usage::

        form = await request.form()
        name = form["name"]
        avatar = form.get_file("avatar")  # UploadFile or None
    """

    __slots__ = ("_files",)

    _files: tuple[tuple[str, UploadFile], ...]

    def __init__(
        self,
        pairs: Iterable[tuple[str, str]] = (),
        files: Iterable[tuple[str, UploadFile]] = (),
    ) -> None:
        super().__init__(pairs)
        object.__setattr__(self, "_files", tuple(files))

    @property
    def files(self) -> list[tuple[str, UploadFile]]:
        """Uploaded files as ``(field name, file)`` pairs in submission order."""
        return list(self._files)

    def get_file(self, name: str) -> UploadFile | None:
        """Return the first file uploaded under *name*."""
        for field_name, upload in self._files:
            if field_name == name:
                return upload
        return None

    def fields(self) -> dict[str, str]:
        """Non-file fields; a repeated name keeps its last value."""
        return dict(self._pairs)

    def to_dict(self) -> dict[str, Any]:
        """Fields merged with files, keyed by field name.

        A file wins over a string field of the same name; a field name
        carrying several files maps to a list of them.
        """
        merged: dict[str, Any] = self.fields()
        grouped: dict[str, list[UploadFile]] = {}
        for field_name, upload in self._files:
            grouped.setdefault(field_name, []).append(upload)
        for field_name, uploads in grouped.items():
            merged[field_name] = uploads[0] if len(uploads) == 1 else uploads
        return merged


def is_multipart(content_type: str | None) -> bool:
    return (content_type or "").lower().startswith("multipart/form-data")


def parse_multipart(body: bytes, content_type: str) -> FormData:
    """Parse a ``multipart/form-data`` body into FormData.

    Raises:
        ValueError: If the content type carries no boundary.
    """
    _, options = parse_options_header(content_type.encode("latin-1"))
    boundary = options.get(b"boundary")
    if not boundary:
        msg = "Multipart form data missing boundary parameter"
        raise ValueError(msg)

    pairs: list[tuple[str, str]] = []
    files: list[tuple[str, UploadFile]] = []

    part_headers: dict[str, str] = {}
    header_field = bytearray()
    header_value = bytearray()
    part_data = bytearray()

    def on_part_begin() -> None:
        part_headers.clear()
        part_data.clear()

    def on_header_field(data: bytes, start: int, end: int) -> None:
        header_field.extend(data[start:end])

    def on_header_value(data: bytes, start: int, end: int) -> None:
        header_value.extend(data[start:end])

    def on_header_end() -> None:
        part_headers[header_field.decode("latin-1").lower()] = header_value.decode("latin-1")
        header_field.clear()
        header_value.clear()

    def on_part_data(data: bytes, start: int, end: int) -> None:
        part_data.extend(data[start:end])

    def on_part_end() -> None:
        disposition = part_headers.get("content-disposition")
        if disposition is None:
            return
        _, params = parse_options_header(disposition.encode("latin-1"))
        raw_name = params.get(b"name")
        if raw_name is None:
            return
        name = raw_name.decode("utf-8")
        raw_filename = params.get(b"filename")
        if raw_filename is not None:
            content = bytes(part_data)
            files.append(
                (
                    name,
                    UploadFile(
                        filename=raw_filename.decode("utf-8"),
                        content_type=part_headers.get("content-type", "application/octet-stream"),
                        size=len(content),
                        _content=content,
                    ),
                )
            )
        else:
            pairs.append((name, part_data.decode("utf-8", errors="replace")))

    parser = MultipartParser(
        boundary,
        {
            "on_part_begin": on_part_begin,
            "on_header_field": on_header_field,
            "on_header_value": on_header_value,
            "on_header_end": on_header_end,
            "on_part_data": on_part_data,
            "on_part_end": on_part_end,
        },
    )
    parser.write(body)
    parser.finalize()

    return FormData(pairs, files)
