"""
Segment callback interface.

The reader calls exactly one of these methods per segment, in stream order.
`position` is the offset of the segment's 0xFF marker byte and `length` is
the segment's length field (0 for SOI, EOI, RSTn and TEM, which carry none).
Any object providing these methods can be passed to the reader.
"""
from __future__ import annotations

from typing import List, Protocol

from .primitives import App0Jfif, Dac, Dht, Dqt, Frame, Rst, Scan


class Handler(Protocol):
    def handle_soi(self, position: int, length: int) -> None: ...

    def handle_eoi(self, position: int, length: int) -> None: ...

    def handle_app(self, position: int, length: int, nr: int, data: bytes) -> None:
        """APPn that is not a JFIF header; `nr` is n (0-15), `data` the raw payload."""

    def handle_app0_jfif(self, position: int, length: int, jfif: App0Jfif) -> None: ...

    def handle_dqt(self, position: int, length: int, tables: List[Dqt]) -> None: ...

    def handle_dht(self, position: int, length: int, tables: List[Dht]) -> None: ...

    def handle_dac(self, position: int, length: int, dac: Dac) -> None: ...

    def handle_frame(self, position: int, length: int, frame: Frame) -> None: ...

    def handle_scan(self, position: int, length: int, scan: Scan) -> None:
        """SOS header; `scan.data` holds the entropy-coded bytes up to the next marker."""

    def handle_dri(self, position: int, length: int, restart: int) -> None:
        """`restart` is the restart interval in MCUs, 0 disables restart markers."""

    def handle_rst(self, position: int, length: int, restart: Rst) -> None:
        """`restart.nr` is the RSTn index (0-7), `restart.data` the bytes up to the next marker."""

    def handle_comment(self, position: int, length: int, data: bytes) -> None:
        """`data` is the raw COM payload, not guaranteed to be valid text."""

    def handle_unknown(self, position: int, length: int, marker: int, data: bytes) -> None:
        """`marker` is the byte following 0xFF (e.g. 0xF0); `data` the raw payload, empty for TEM."""
