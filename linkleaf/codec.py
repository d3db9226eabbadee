"""
Codec module for converting feeds to and from their serialized forms.

The binary form is the protobuf wire encoding of the ``linkleaf.v1.Feed``
message and is the only persisted form. The text form is the protobuf JSON
mapping of the same message, meant for hand editing.
"""
import json
import logging
from json.decoder import JSONDecodeError
from typing import Optional

from google.protobuf import descriptor_pb2, descriptor_pool, json_format, message_factory
from google.protobuf import unknown_fields
from google.protobuf.message import DecodeError, Message

from linkleaf.exceptions import FeedDecodeError, FeedValidationError
from linkleaf.models import Feed, Link

logger = logging.getLogger(__name__)

PROTO_PACKAGE = "linkleaf.v1"

_FieldProto = descriptor_pb2.FieldDescriptorProto


def _add_field(message: descriptor_pb2.DescriptorProto, name: str, number: int, field_type: int,
               repeated: bool = False, type_name: Optional[str] = None, optional: bool = False) -> None:
    """
    Declare a field on a message descriptor.

    Args:
        message: Message descriptor being built
        name: Field name
        number: Field number on the wire
        field_type: FieldDescriptorProto.TYPE_* constant
        repeated: Whether the field is a repeated field
        type_name: Fully qualified type for message fields
        optional: Give the field explicit presence (proto3 ``optional``)
    """
    field = message.field.add()
    field.name = name
    field.number = number
    field.type = field_type
    field.label = _FieldProto.LABEL_REPEATED if repeated else _FieldProto.LABEL_OPTIONAL
    if type_name:
        field.type_name = type_name
    if optional:
        # proto3 optional fields live in a synthetic oneof of their own
        field.oneof_index = len(message.oneof_decl)
        message.oneof_decl.add().name = f"_{name}"
        field.proto3_optional = True


def _build_schema() -> descriptor_pool.DescriptorPool:
    """Build a descriptor pool holding the linkleaf.v1 schema."""
    file_proto = descriptor_pb2.FileDescriptorProto()
    file_proto.name = "linkleaf/v1/feed.proto"
    file_proto.package = PROTO_PACKAGE
    file_proto.syntax = "proto3"

    link = file_proto.message_type.add()
    link.name = "Link"
    _add_field(link, "id", 1, _FieldProto.TYPE_STRING)
    _add_field(link, "title", 2, _FieldProto.TYPE_STRING)
    _add_field(link, "url", 3, _FieldProto.TYPE_STRING)
    _add_field(link, "summary", 4, _FieldProto.TYPE_STRING, optional=True)
    _add_field(link, "tags", 5, _FieldProto.TYPE_STRING, repeated=True)
    _add_field(link, "date", 6, _FieldProto.TYPE_STRING)
    _add_field(link, "via", 7, _FieldProto.TYPE_STRING, optional=True)

    feed = file_proto.message_type.add()
    feed.name = "Feed"
    _add_field(feed, "version", 1, _FieldProto.TYPE_UINT32)
    _add_field(feed, "title", 2, _FieldProto.TYPE_STRING)
    _add_field(feed, "generated_at", 3, _FieldProto.TYPE_STRING)
    _add_field(feed, "links", 4, _FieldProto.TYPE_MESSAGE, repeated=True,
               type_name=f".{PROTO_PACKAGE}.Link")

    pool = descriptor_pool.DescriptorPool()
    pool.AddSerializedFile(file_proto.SerializeToString())
    return pool


_POOL = _build_schema()
FeedMessage = message_factory.GetMessageClass(_POOL.FindMessageTypeByName(f"{PROTO_PACKAGE}.Feed"))


def _to_message(feed: Feed) -> Message:
    """Convert a Feed into its protobuf message."""
    message = FeedMessage()
    try:
        message.version = feed.version
    except (ValueError, TypeError) as e:
        raise FeedValidationError(f"Feed version must be an unsigned 32-bit integer, got {feed.version!r}") from e

    try:
        message.title = feed.title
        message.generated_at = feed.generated_at

        for link in feed.links:
            entry = message.links.add()
            entry.id = link.id
            entry.title = link.title
            entry.url = link.url
            entry.date = link.date
            entry.tags.extend(link.tags)
            if link.summary is not None:
                entry.summary = link.summary
            if link.via is not None:
                entry.via = link.via
    except ValueError as e:
        raise FeedValidationError(f"Feed text is not valid Unicode: {e}") from e

    return message


def _from_message(message: Message) -> Feed:
    """Convert a protobuf message into a Feed."""
    links = [
        Link(
            id=entry.id,
            title=entry.title,
            url=entry.url,
            date=entry.date,
            summary=entry.summary if entry.HasField('summary') else None,
            tags=list(entry.tags),
            via=entry.via if entry.HasField('via') else None,
        )
        for entry in message.links
    ]
    return Feed(
        version=message.version,
        title=message.title,
        generated_at=message.generated_at,
        links=links,
    )


def _has_unknown_fields(message: Message) -> bool:
    """Check the feed and each of its links for fields outside the schema."""
    if len(unknown_fields.UnknownFieldSet(message)):
        return True
    return any(len(unknown_fields.UnknownFieldSet(entry)) for entry in message.links)


def encode_binary(feed: Feed) -> bytes:
    """
    Encode a feed into its canonical binary form.

    Equal feeds always produce equal bytes. Absent optional fields are
    omitted from the output.

    Args:
        feed: Feed to encode

    Returns:
        Protobuf wire bytes

    Raises:
        FeedValidationError: If the version does not fit an unsigned 32-bit integer
            or a text field cannot be encoded as UTF-8
    """
    message = _to_message(feed)
    try:
        data = message.SerializeToString(deterministic=True)
    except UnicodeEncodeError as e:
        raise FeedValidationError(f"Feed text is not valid Unicode: {e}") from e
    logger.debug(f"Encoded feed with {len(feed.links)} links into {len(data)} bytes")
    return data


def decode_binary(data: bytes) -> Feed:
    """
    Decode the canonical binary form into a feed.

    Decoding is strict: fields unknown to the schema are rejected.

    Args:
        data: Protobuf wire bytes

    Returns:
        Decoded Feed

    Raises:
        FeedDecodeError: If the bytes are not a valid feed encoding
    """
    message = FeedMessage()
    try:
        message.ParseFromString(data)
    except (DecodeError, UnicodeDecodeError) as e:
        raise FeedDecodeError(f"Invalid binary feed encoding: {e}") from e

    if _has_unknown_fields(message):
        raise FeedDecodeError("Invalid binary feed encoding: unexpected fields")

    return _from_message(message)


def encode_text(feed: Feed) -> bytes:
    """
    Encode a feed into its editable text (JSON) form.

    Keys follow the schema's declaration order, so output is stable.

    Args:
        feed: Feed to encode

    Returns:
        UTF-8 JSON bytes ending with a newline
    """
    text = json_format.MessageToJson(
        _to_message(feed),
        preserving_proto_field_name=True,
        indent=2,
        ensure_ascii=False,
    )
    return (text + "\n").encode('utf-8')


def decode_text(data: bytes) -> Feed:
    """
    Decode the text (JSON) form into a feed.

    Unrecognized keys are ignored so newer files still load.

    Args:
        data: UTF-8 JSON bytes

    Returns:
        Decoded Feed

    Raises:
        FeedDecodeError: If the bytes are not valid JSON for the feed schema
    """
    try:
        document = json.loads(data.decode('utf-8'))
    except (JSONDecodeError, UnicodeDecodeError) as e:
        raise FeedDecodeError(f"Invalid text feed encoding: {e}") from e

    if not isinstance(document, dict):
        raise FeedDecodeError(f"Invalid text feed encoding: expected a JSON object, got {type(document).__name__}")

    message = FeedMessage()
    try:
        json_format.ParseDict(document, message, ignore_unknown_fields=True)
    except json_format.ParseError as e:
        raise FeedDecodeError(f"Invalid text feed encoding: {e}") from e

    return _from_message(message)

