# spongetcp

Building blocks for a user-space TCP implementation, written in plain Python
with no third-party dependencies.

## What is inside

- `spongetcp.byte_stream.ByteStream`: a flow-controlled, in-memory byte
  stream with a fixed capacity. `write()` accepts as many bytes as fit and
  returns how many it took. `read()`, `peek_output()` and `pop_output()` work
  on the output side. `end_input()` and `eof()` mark and report the end of the
  stream.
- `spongetcp.stream_reassembler.StreamReassembler`: takes substrings that may
  arrive out of order or overlap, with `push_substring(data, index, eof)`, and
  writes them in order into the `ByteStream` returned by `stream_out()`. The
  capacity limits both the bytes already assembled and the bytes still waiting
  to be assembled. Bytes beyond it are discarded.
- `spongetcp.wrapping_integers`: the `WrappingInt32` type for 32-bit sequence
  numbers, with `wrap(n, isn)` and `unwrap(n, isn, checkpoint)` to convert to
  and from 64-bit absolute sequence numbers.
- `spongetcp.tcp_receiver.TCPReceiver`: feeds inbound `TCPSegment`s into a
  reassembler. It reports `ackno()`, which is `None` before a SYN arrives, and
  `window_size()`.
- `spongetcp.tcp_sender.TCPSender`: reads from `stream_in()` and fills the
  window with segments using `fill_window()`. It handles acknowledgments with
  `ack_received()` and retransmits the oldest outstanding segment on `tick()`,
  doubling the timeout each time. Segments to send are queued in
  `segments_out()`.
- `spongetcp.tcp_header.TCPHeader` and `spongetcp.tcp_segment.TCPSegment`:
  parsing and serialising TCP segments, with the Internet checksum. Parsing
  problems raise `spongetcp.parser.ParseError`, which carries a `ParseResult`.
- `spongetcp.tcp_config`: `TCPConfig`, which holds the default capacity,
  maximum payload size and retransmission timeout, and `FdAdapterConfig`.
- `spongetcp.tcp_state`: `receiver_state_summary()` and
  `sender_state_summary()` describe the state of a receiver or sender, using
  the `TCPReceiverStateSummary` and `TCPSenderStateSummary` enums.
- `spongetcp.buffer`: `Buffer`, `BufferList` and `BufferViewList`, byte strings
  that can drop bytes from the front.
- `spongetcp.parser`: `NetParser` and `unparse_u8` / `unparse_u16` /
  `unparse_u32`, for big-endian integers.
- `spongetcp.util`: `InternetChecksum`, `hexdump()`, `timestamp_ms()` and
  `get_random_generator()`.
- Operating-system helpers:
  - `spongetcp.address.Address`: IPv4 addresses and name resolution.
  - `spongetcp.file_descriptor.FileDescriptor`: a descriptor handle that counts
    reads and writes and can be used in a `with` block.
  - `spongetcp.netsocket`: `UDPSocket`, `TCPSocket` and `LocalStreamSocket`.
  - `spongetcp.eventloop.EventLoop`: a `select.poll`-based loop that runs
    callbacks when descriptors become ready.

The sender and receiver log what they do through the standard `logging`
module at debug level.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from spongetcp.stream_reassembler import StreamReassembler

reassembler = StreamReassembler(65000)
reassembler.push_substring(b"efgh", 4, True)
reassembler.push_substring(b"abcd", 0, False)

stream = reassembler.stream_out()
assert stream.read(stream.buffer_size()) == b"abcdefgh"
assert stream.eof()
```

```python
from spongetcp.wrapping_integers import WrappingInt32, wrap, unwrap

isn = WrappingInt32(2**32 - 2)
seqno = wrap(5, isn)
assert unwrap(seqno, isn, 0) == 5
```

## What it does not do

- There is no full TCP connection object that joins a sender and a receiver.
  There is no handling of RST and no connection state machine beyond the
  summaries in `spongetcp.tcp_state`.
- There is no IP, Ethernet or ARP layer, and no TUN/TAP device support.
  Segments are not carried anywhere on their own.
- There is no command-line program. The package is a library only.
- The socket and event-loop helpers need a POSIX system, because they use
  `select.poll` and `os.writev`.