from dataclasses import dataclass, field
from typing import List

SOF_NAMES = {
    0: "Baseline DCT",
    1: "Extended sequential DCT, Huffman coding",
    2: "Progressive DCT, Huffman coding",
    3: "Lossless (sequential), Huffman coding",
    5: "Differential sequential DCT, Huffman coding",
    6: "Differential progressive DCT, Huffman coding",
    7: "Differential lossless (sequential), Huffman coding",
    9: "Extended sequential DCT, arithmetic coding",
    10: "Progressive DCT, arithmetic coding",
    11: "Lossless (sequential), arithmetic coding",
    13: "Differential sequential DCT, arithmetic coding",
    14: "Differential progressive DCT, arithmetic coding",
    15: "Differential lossless (sequential), arithmetic coding",
}


@dataclass(frozen=True)
class App0Jfif:
    major: int = 1
    minor: int = 1
    # 0 = no units (pixel aspect ratio), 1 = dots per inch, 2 = dots per cm
    unit: int = 0
    x_density: int = 1
    y_density: int = 1
    x_thumbnail: int = 0
    y_thumbnail: int = 0
    # raw RGB triplets, x_thumbnail * y_thumbnail * 3 bytes
    thumbnail: bytes = b""


@dataclass(frozen=True)
class Dqt:
    dest: int = 0
    # 0 = 8-bit values, 1 = 16-bit values
    precision: int = 0
    values: List[int] = field(default_factory=list)


@dataclass(frozen=True)
class Dht:
    dest: int = 0
    # 0 = DC, 1 = AC
    class_: int = 0
    # number of codes for each bit length 1..16
    code_lengths: List[int] = field(default_factory=list)
    values: List[int] = field(default_factory=list)


@dataclass(frozen=True)
class DacParam:
    class_: int = 0
    dest: int = 0
    value: int = 0


@dataclass(frozen=True)
class Dac:
    params: List[DacParam] = field(default_factory=list)


@dataclass(frozen=True)
class FrameComponent:
    id: int = 0
    horizontal_sampling_factor: int = 0
    vertical_sampling_factor: int = 0
    quantization_table: int = 0


@dataclass(frozen=True)
class Frame:
    # low nibble of the SOFn marker
    sof: int = 0
    precision: int = 0
    dimension_y: int = 0
    dimension_x: int = 0
    components: List[FrameComponent] = field(default_factory=list)

    @property
    def sof_name(self) -> str:
        return SOF_NAMES.get(self.sof, f"Unknown SOF ({self.sof})")


@dataclass(frozen=True)
class ScanComponent:
    id: int = 0
    dc_table: int = 0
    ac_table: int = 0


@dataclass(frozen=True)
class Scan:
    components: List[ScanComponent] = field(default_factory=list)
    selection_start: int = 0
    selection_end: int = 63
    approximation_low: int = 0
    approximation_high: int = 0
    # entropy-coded data up to the next marker
    data: bytes = b""


@dataclass(frozen=True)
class Rst:
    nr: int = 0
    data: bytes = b""
