__version__ = "0.1.0"

from mimer.encoder import MessageEncoder, encode, encode_to_bytes
from mimer.message import Attachment, BodyPart, Message, MessageBuilder
from mimer.sources import ByteSource

__all__ = [
    "Attachment",
    "BodyPart",
    "ByteSource",
    "Message",
    "MessageBuilder",
    "MessageEncoder",
    "encode",
    "encode_to_bytes",
]
