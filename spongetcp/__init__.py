"""Byte streams, stream reassembly, TCP sender and receiver, segment parsing and socket helpers."""

__version__ = "0.1.0"

__all__ = [
    "address",
    "buffer",
    "byte_stream",
    "eventloop",
    "file_descriptor",
    "netsocket",
    "parser",
    "stream_reassembler",
    "tcp_config",
    "tcp_header",
    "tcp_receiver",
    "tcp_segment",
    "tcp_sender",
    "tcp_state",
    "util",
    "wrapping_integers",
]