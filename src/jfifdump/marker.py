# --------------------------------------------------------
# |segment name|marker value|has length|description       |
# --------------------------------------------------------
# |SOI         |0xFFD8      |No        |start of image    |
# |EOI         |0xFFD9      |No        |end of image      |
# |RSTn        |0xFFD0-D7   |No        |restart marker    |
# |TEM         |0xFF01      |No        |temporary (arith.)|
# |SOFn        |0xFFC0-CF   |Yes       |frame header      |
# |DHT         |0xFFC4      |Yes       |huffman table     |
# |DAC         |0xFFCC      |Yes       |arithmetic cond.  |
# |SOS         |0xFFDA      |Yes       |start of scan     |
# |DQT         |0xFFDB      |Yes       |quantization table|
# |DRI         |0xFFDD      |Yes       |restart interval  |
# |APPn        |0xFFE0-EF   |Yes       |application data  |
# |COM         |0xFFFE      |Yes       |comment           |
# --------------------------------------------------------
# The 2 byte length field counts itself, so the payload is length - 2 bytes.
# The parse_* functions take the payload only.
from __future__ import annotations

import io
from typing import BinaryIO, List, Optional

import numpy as np

from .primitives import (
    App0Jfif, Dac, DacParam, Dht, Dqt, Frame, FrameComponent, Scan, ScanComponent,
)

TEM = 0x01
SOI = 0xD8
EOI = 0xD9
SOS = 0xDA
DQT = 0xDB
DRI = 0xDD
DHT = 0xC4
JPG = 0xC8
DAC = 0xCC
COM = 0xFE
APP0 = 0xE0
APP15 = 0xEF
RST0 = 0xD0
RST7 = 0xD7

JFIF_IDENTIFIER = b"JFIF\x00"
JFIF_HEADER_LENGTH = 14


def is_rst(marker: int) -> bool:
    return RST0 <= marker <= RST7


def is_app(marker: int) -> bool:
    return APP0 <= marker <= APP15


def is_sof(marker: int) -> bool:
    return 0xC0 <= marker <= 0xCF and marker not in (DHT, JPG, DAC)


def marker_info(marker: int) -> str:
    marker_dict = {
        TEM: "Temporary (TEM)",
        SOI: "Start of Image (SOI)",
        EOI: "End of Image (EOI)",
        DQT: "Define Quantization Table (DQT)",
        DHT: "Define Huffman Table (DHT)",
        DAC: "Define Arithmetic Coding Conditioning (DAC)",
        SOS: "Start of Scan (SOS)",
        DRI: "Define Restart Interval (DRI)",
        COM: "Comment (COM)",
    }
    if is_app(marker):
        return f"Application Segment {marker - APP0} (APP{marker - APP0})"
    if is_rst(marker):
        return f"Restart Marker {marker - RST0} (RST{marker - RST0})"
    if is_sof(marker):
        return f"Start of Frame {marker - 0xC0} (SOF{marker - 0xC0})"

    return marker_dict.get(marker, "Unknown Marker")


def read_exact(f: BinaryIO, n: int) -> bytes:
    data = f.read(n)
    if len(data) != n:
        raise IOError(f"Unexpected length while reading {n} bytes")
    return data


def read_u8(f) -> int:
    byte = f.read(1)
    if len(byte) != 1:
        raise IOError("Unexpected length while reading 1 byte")
    return byte[0]


def read_u16(f) -> int:
    bytes_read = f.read(2)
    if len(bytes_read) != 2:
        raise IOError("Unexpected length while reading 2 bytes")
    return (bytes_read[0] << 8) | bytes_read[1]


def parse_app(nr: int, data: bytes) -> Optional[App0Jfif]:
    """Parse an APP0 JFIF payload, None for any other APPn content."""
    if nr != 0 or len(data) < JFIF_HEADER_LENGTH or not data.startswith(JFIF_IDENTIFIER):
        return None

    f = io.BytesIO(data)
    f.seek(len(JFIF_IDENTIFIER))
    major = read_u8(f)
    minor = read_u8(f)
    # 0 = no units, 1 = dots per inch, 2 = dots per cm
    unit = read_u8(f)
    x_density = read_u16(f)
    y_density = read_u16(f)
    x_thumbnail = read_u8(f)
    y_thumbnail = read_u8(f)
    # thumbnail is whatever follows, x * y RGB triplets when well formed
    thumbnail = f.read()

    return App0Jfif(
        major=major,
        minor=minor,
        unit=unit,
        x_density=x_density,
        y_density=y_density,
        x_thumbnail=x_thumbnail,
        y_thumbnail=y_thumbnail,
        thumbnail=thumbnail,
    )


def parse_dqt(data: bytes) -> List[Dqt]:
    """Parse DQT (Define Quantization Table) payload."""
    f = io.BytesIO(data)
    tables = []

    while f.tell() < len(data):
        # Table info: 1 byte (upper 4 bits = precision, lower 4 bits = table ID)
        table_info = read_u8(f)
        precision = (table_info >> 4) & 0x0F  # 0 = 8-bit, 1 = 16-bit
        dest = table_info & 0x0F

        if precision == 0:
            values = np.frombuffer(read_exact(f, 64), dtype=np.uint8)
        else:
            values = np.frombuffer(read_exact(f, 128), dtype=">u2")

        tables.append(Dqt(dest=dest, precision=precision, values=values.tolist()))

    return tables


def parse_dht(data: bytes) -> List[Dht]:
    """Parse DHT (Define Huffman Table) payload."""
    f = io.BytesIO(data)
    tables = []

    while f.tell() < len(data):
        # Table info: 1 byte (upper 4 bits = DC/AC, lower 4 bits = table ID)
        table_info = read_u8(f)
        table_class = (table_info >> 4) & 0x0F  # 0 = DC, 1 = AC
        dest = table_info & 0x0F

        # number of codes for each bit length (1-16), then the symbols
        code_lengths = list(read_exact(f, 16))
        values = list(read_exact(f, sum(code_lengths)))

        tables.append(Dht(dest=dest, class_=table_class, code_lengths=code_lengths, values=values))

    return tables


def parse_dac(data: bytes) -> Dac:
    """Parse DAC (Define Arithmetic Coding conditioning) payload."""
    f = io.BytesIO(data)
    params = []

    while f.tell() < len(data):
        # upper 4 bits = table class, lower 4 bits = table ID
        table_info = read_u8(f)
        value = read_u8(f)
        params.append(DacParam(class_=(table_info >> 4) & 0x0F, dest=table_info & 0x0F, value=value))

    return Dac(params=params)


def parse_sof(sof: int, data: bytes) -> Frame:
    """Parse SOFn (Start of Frame) payload, `sof` being the marker's low nibble."""
    f = io.BytesIO(data)
    precision = read_u8(f)
    # Number of lines first, then samples per line
    dimension_y = read_u16(f)
    dimension_x = read_u16(f)
    num_components = read_u8(f)

    components = []
    for _ in range(num_components):
        component_id = read_u8(f)
        # Sampling factors: 1 byte (upper 4 bits = horizontal, lower 4 bits = vertical)
        sampling = read_u8(f)
        quant_table_id = read_u8(f)
        components.append(
            FrameComponent(
                id=component_id,
                horizontal_sampling_factor=(sampling >> 4) & 0x0F,
                vertical_sampling_factor=sampling & 0x0F,
                quantization_table=quant_table_id,
            )
        )

    return Frame(
        sof=sof,
        precision=precision,
        dimension_y=dimension_y,
        dimension_x=dimension_x,
        components=components,
    )


def parse_sos(data: bytes, scan_data: bytes = b"") -> Scan:
    """Parse SOS (Start of Scan) header. The entropy-coded data is passed in separately."""
    f = io.BytesIO(data)
    num_components = read_u8(f)

    components = []
    for _ in range(num_components):
        component_id = read_u8(f)
        # Table mapping: 1 byte (upper 4 bits = DC table, lower 4 bits = AC table)
        table_mapping = read_u8(f)
        components.append(
            ScanComponent(
                id=component_id,
                dc_table=(table_mapping >> 4) & 0x0F,
                ac_table=table_mapping & 0x0F,
            )
        )

    selection_start = read_u8(f)
    selection_end = read_u8(f)
    approximation = read_u8(f)

    return Scan(
        components=components,
        selection_start=selection_start,
        selection_end=selection_end,
        approximation_low=approximation & 0x0F,
        approximation_high=(approximation >> 4) & 0x0F,
        data=scan_data,
    )


def parse_dri(data: bytes) -> int:
    return read_u16(io.BytesIO(data))
