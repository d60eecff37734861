from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import BinaryIO, Union

from .handler import Handler
from .marker import (
    COM, DAC, DHT, DQT, DRI, EOI, RST0, SOI, SOS, TEM, APP0,
    is_app, is_rst, is_sof, marker_info,
    read_exact, read_u16,
    parse_app, parse_dac, parse_dht, parse_dqt, parse_dri, parse_sof, parse_sos,
)
from .primitives import Rst

logger = logging.getLogger(__name__)

MARKER_PREFIX = 0xFF


class Reader:
    """
    Walks the marker stream of a JPEG file and reports every segment to a handler.

    The file object must be seekable: the end of entropy-coded data is only
    known after the following marker has been read.
    """

    def __init__(self, f: BinaryIO):
        self.f = f

    def read(self, handler: Handler) -> None:
        skipped = 0

        while True:
            # 1. find 0xFF
            b = self.f.read(1)
            if not b:
                break
            if b[0] != MARKER_PREFIX:
                skipped += 1
                continue

            position = self.f.tell() - 1

            # 2. marker type, 0xFF fill bytes may precede it
            b = self.f.read(1)
            while b and b[0] == MARKER_PREFIX:
                position += 1
                b = self.f.read(1)
            if not b:
                break
            marker = b[0]

            if marker == 0x00:
                skipped += 2
                continue  # stuffed byte

            if skipped:
                logger.warning("Skipped %d bytes before marker at 0x%X", skipped, position)
                skipped = 0

            logger.debug("Found %s at 0x%X", marker_info(marker), position)

            if marker == SOI:
                handler.handle_soi(position, 0)
            elif marker == EOI:
                handler.handle_eoi(position, 0)
                break
            elif is_rst(marker):
                data = self._read_entropy_data()
                handler.handle_rst(position, 0, Rst(nr=marker - RST0, data=data))
            elif marker == TEM:
                # standalone, no length field
                handler.handle_unknown(position, 0, marker, b"")
            else:
                self._read_segment(handler, position, marker)

    def _read_segment(self, handler: Handler, position: int, marker: int) -> None:
        length = read_u16(self.f)
        if length < 2:
            raise IOError(f"Invalid length {length} for marker 0x{marker:X} at 0x{position:X}")
        data = read_exact(self.f, length - 2)
        logger.debug("Segment length %d", length)

        if is_app(marker):
            nr = marker - APP0
            jfif = parse_app(nr, data)
            if jfif is not None:
                handler.handle_app0_jfif(position, length, jfif)
            else:
                handler.handle_app(position, length, nr, data)
        elif marker == DQT:
            handler.handle_dqt(position, length, parse_dqt(data))
        elif marker == DHT:
            handler.handle_dht(position, length, parse_dht(data))
        elif marker == DAC:
            handler.handle_dac(position, length, parse_dac(data))
        elif is_sof(marker):
            handler.handle_frame(position, length, parse_sof(marker & 0x0F, data))
        elif marker == SOS:
            # SOS header is followed directly by the entropy-coded data
            scan_data = self._read_entropy_data()
            handler.handle_scan(position, length, parse_sos(data, scan_data))
        elif marker == DRI:
            handler.handle_dri(position, length, parse_dri(data))
        elif marker == COM:
            handler.handle_comment(position, length, data)
        else:
            handler.handle_unknown(position, length, marker, data)

    def _read_entropy_data(self) -> bytes:
        """Read up to the next marker, keeping stuffed 0xFF00 pairs as they are."""
        data = bytearray()

        while True:
            b = self.f.read(1)
            if not b:
                return bytes(data)
            if b[0] != MARKER_PREFIX:
                data += b
                continue

            check_byte = self.f.read(1)
            if not check_byte:
                data += b
                return bytes(data)
            if check_byte[0] == 0x00:
                data += b + check_byte
                continue

            # a real marker, leave it for the caller
            self.f.seek(-2, io.SEEK_CUR)
            return bytes(data)


def dump(path: Union[str, Path], handler: Handler) -> None:
    """Report every segment of the JPEG file at `path` to `handler`."""
    with open(path, "rb") as f:
        Reader(f).read(handler)
