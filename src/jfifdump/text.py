"""Plain text rendering of JPEG segments."""
from __future__ import annotations

import sys
from typing import List, Optional, TextIO

from .primitives import App0Jfif, Dac, Dht, Dqt, Frame, Rst, Scan

# APPn payloads are cut to this many bytes without any marker
APP_PREVIEW_LENGTH = 20

UNIT_NAMES = {
    0: "pixel",
    1: "dots per inch",
    2: "dots per cm",
}


class OutputError(IOError):
    """Raised when the output sink refuses a write."""


def ascii_value(v: int) -> str:
    """Printable ASCII and space as-is, everything else as \\x0xHH."""
    if 0x21 <= v <= 0x7E or v == 0x20:
        return chr(v)
    return f"\\x0x{v:02X}"


def unit_name(unit: int) -> str:
    return UNIT_NAMES.get(unit, f"Unknown unit: {unit}")


class TextFormat:
    """
    Writes one text record per segment to `out` (stdout by default).

    With `verbose` every record starts with `0x<position>/0x<length>: ` and
    DQT values and DHT code lengths are listed. The renderer assumes it is
    the only writer on `out` while a file is being dumped.
    """

    def __init__(self, verbose: bool = False, out: Optional[TextIO] = None):
        self._verbose = verbose
        self.out = out if out is not None else sys.stdout

    @property
    def verbose(self) -> bool:
        return self._verbose

    def _write(self, text: str) -> None:
        try:
            self.out.write(text)
        except (OSError, ValueError) as e:
            raise OutputError(f"Failed to write output: {e}") from e

    def _writeln(self, text: str = "") -> None:
        self._write(text + "\n")

    def _prefix(self, position: int, length: int) -> None:
        if self._verbose:
            self._write(f"0x{position:X}/0x{length:X}: ")

    def handle_app(self, position: int, length: int, nr: int, data: bytes) -> None:
        self._prefix(position, length)
        preview = "".join(ascii_value(v) for v in data[:APP_PREVIEW_LENGTH])
        self._writeln(f"App(0x{nr:X}):{preview}")

    def handle_app0_jfif(self, position: int, length: int, jfif: App0Jfif) -> None:
        self._prefix(position, length)
        self._writeln("App(0x0): JFIF")
        self._writeln(f"  Version: {jfif.major}.{jfif.minor:02}")
        self._writeln(f"  Density: {jfif.x_density}x{jfif.y_density} {unit_name(jfif.unit)}")
        self._writeln(f"  Thumbnail: {jfif.x_thumbnail}x{jfif.y_thumbnail}")

    def handle_dqt(self, position: int, length: int, tables: List[Dqt]) -> None:
        self._prefix(position, length)
        self._writeln("DQT:")

        for table in tables:
            self._write(f"  {table.dest}: Precision {table.precision}")
            if self._verbose:
                for i, v in enumerate(table.values):
                    if i % 8 == 0:
                        self._write("\n    ")
                    if v < 10:
                        self._write(" ")
                    if v < 100:
                        self._write(" ")
                    self._write(f"{v}, ")
            self._writeln()

    def handle_dht(self, position: int, length: int, tables: List[Dht]) -> None:
        self._prefix(position, length)
        self._writeln("DHT:")

        for table in tables:
            self._writeln(f"  Table {table.dest}: Class {table.class_}")
            if self._verbose:
                lengths = ", ".join(str(v) for v in table.code_lengths)
                self._writeln(f"    Code lengths: {lengths}")

    def handle_dac(self, position: int, length: int, dac: Dac) -> None:
        self._prefix(position, length)
        self._writeln("DAC:")

        for param in dac.params:
            self._writeln(f"  Class: {param.class_}   Dest: {param.dest}    Value: {param.value}")

    def handle_frame(self, position: int, length: int, frame: Frame) -> None:
        self._prefix(position, length)
        self._writeln(f"Frame: {frame.sof_name}")
        self._writeln(f"  Precision: {frame.precision}")
        self._writeln(f"  Dimension: {frame.dimension_x}x{frame.dimension_y}")

        for c in frame.components:
            self._writeln(
                f"  Component({c.id}): Sampling {c.horizontal_sampling_factor}x"
                f"{c.vertical_sampling_factor} Quantization: {c.quantization_table}"
            )

    def handle_scan(self, position: int, length: int, scan: Scan) -> None:
        self._prefix(position, length)
        self._writeln("Scan:")

        for c in scan.components:
            self._writeln(f"  Component: {c.id} DC:{c.dc_table} AC:{c.ac_table}")

        self._writeln(f"  Selection: {scan.selection_start} to {scan.selection_end}")
        self._writeln(f"  Approximation: {scan.approximation_low} to {scan.approximation_high}")
        self._writeln(f"  Data: {len(scan.data)} bytes")

    def handle_dri(self, position: int, length: int, restart: int) -> None:
        self._prefix(position, length)
        self._writeln(f"DRI: {restart}")

    def handle_rst(self, position: int, length: int, restart: Rst) -> None:
        self._prefix(position, length)
        self._writeln(f"RST({restart.nr}): Data: {len(restart.data)} bytes")

    def handle_comment(self, position: int, length: int, data: bytes) -> None:
        self._prefix(position, length)
        try:
            comment = data.decode("utf-8")
        except UnicodeDecodeError:
            self._writeln(f"Comment: BAD STRING WITH LENGTH {len(data)}")
        else:
            self._writeln(f"Comment: {comment}")

    def handle_unknown(self, position: int, length: int, marker: int, data: bytes) -> None:
        self._prefix(position, length)
        self._writeln(f"Unknown(0x{marker:X}): Length {len(data)}")

    def handle_eoi(self, position: int, length: int) -> None:
        self._prefix(position, length)
        self._writeln("EOI")

    def handle_soi(self, position: int, length: int) -> None:
        self._prefix(position, length)
        self._writeln("SOI")
