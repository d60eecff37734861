"""Unit tests for the text renderer."""
import io
import pytest

from jfifdump.primitives import (
    App0Jfif, Dac, DacParam, Dht, Dqt, Frame, FrameComponent, Rst, Scan, ScanComponent,
)
from jfifdump.text import OutputError, TextFormat, ascii_value, unit_name


def render(verbose, method, *args):
    out = io.StringIO()
    getattr(TextFormat(verbose=verbose, out=out), method)(*args)
    return out.getvalue()


# one call per handler operation, position 0x1A2 and length 0x10
ALL_SEGMENTS = [
    ("handle_soi", ()),
    ("handle_eoi", ()),
    ("handle_app", (1, b"Exif\x00\x00")),
    ("handle_app0_jfif", (App0Jfif(),)),
    ("handle_dqt", ([Dqt(values=[1] * 64)],)),
    ("handle_dht", ([Dht(code_lengths=[0] * 16)],)),
    ("handle_dac", (Dac(params=[DacParam()]),)),
    ("handle_frame", (Frame(components=[FrameComponent(id=1)]),)),
    ("handle_scan", (Scan(components=[ScanComponent(id=1)]),)),
    ("handle_dri", (4,)),
    ("handle_rst", (Rst(nr=0),)),
    ("handle_comment", (b"hello",)),
    ("handle_unknown", (0xE5, b"1234567")),
]


class TestAsciiValue:
    """Tests for the byte rendering helper."""

    def test_printable(self):
        assert ascii_value(ord("A")) == "A"
        assert ascii_value(ord("~")) == "~"
        assert ascii_value(ord("!")) == "!"

    def test_space(self):
        assert ascii_value(0x20) == " "

    def test_escaped(self):
        assert ascii_value(0x00) == "\\x0x00"
        assert ascii_value(0x0A) == "\\x0x0A"
        assert ascii_value(0x7F) == "\\x0x7F"
        assert ascii_value(0xFF) == "\\x0xFF"

    def test_all_bytes(self):
        """Every byte maps to one character or a 6 character escape."""
        for b in range(256):
            token = ascii_value(b)
            if 0x20 <= b <= 0x7E:
                assert token == chr(b)
            else:
                assert token == "\\x0x%02X" % b
                assert len(token) == 6


class TestUnitName:
    @pytest.mark.parametrize("unit, name", [
        (0, "pixel"),
        (1, "dots per inch"),
        (2, "dots per cm"),
        (3, "Unknown unit: 3"),
        (255, "Unknown unit: 255"),
    ])
    def test_mapping(self, unit, name):
        assert unit_name(unit) == name


class TestPrefix:
    """The offset/length prefix appears on every record iff verbose."""

    @pytest.mark.parametrize("method, args", ALL_SEGMENTS)
    def test_verbose_prefix(self, method, args):
        text = render(True, method, 0x1A2, 0x10, *args)
        assert text.startswith("0x1A2/0x10: ")
        assert text.count("0x1A2/0x10: ") == 1

    @pytest.mark.parametrize("method, args", ALL_SEGMENTS)
    def test_no_prefix(self, method, args):
        text = render(False, method, 0x1A2, 0x10, *args)
        assert "0x1A2/0x10" not in text
        assert text.endswith("\n")

    def test_verbose_is_read_only(self):
        fmt = TextFormat(verbose=True, out=io.StringIO())
        assert fmt.verbose is True
        with pytest.raises(AttributeError):
            fmt.verbose = False


class TestSoiEoi:
    def test_soi(self):
        assert render(False, "handle_soi", 0, 0) == "SOI\n"

    def test_eoi_verbose(self):
        assert render(True, "handle_eoi", 0x2F0, 0) == "0x2F0/0x0: EOI\n"


class TestApp:
    """Tests for generic APPn segments."""

    def test_app_printable(self):
        assert render(False, "handle_app", 2, 30, 1, b"Exif\x00\x00MM") == "App(0x1):Exif\\x0x00\\x0x00MM\n"

    def test_escape_keeps_hex_prefix(self):
        """Escaped bytes carry the 0x prefix inside the \\x escape."""
        assert render(False, "handle_app", 0, 4, 1, b"\x00A") == "App(0x1):\\x0x00A\n"

    def test_app_number_hex(self):
        assert render(False, "handle_app", 2, 4, 14, b"Ad").startswith("App(0xE):")

    @pytest.mark.parametrize("size, shown", [(19, 19), (20, 20), (25, 20)])
    def test_truncated_to_20_bytes(self, size, shown):
        text = render(False, "handle_app", 0, size + 2, 2, b"a" * size)
        assert text == "App(0x2):" + "a" * shown + "\n"

    def test_truncation_counts_bytes_not_characters(self):
        text = render(False, "handle_app", 0, 30, 2, b"\x00" * 25)
        assert text == "App(0x2):" + "\\x0x00" * 20 + "\n"

    def test_empty_payload(self):
        assert render(False, "handle_app", 0, 2, 3, b"") == "App(0x3):\n"


class TestJfif:
    def test_jfif_scenario(self):
        jfif = App0Jfif(major=1, minor=2, unit=1, x_density=300, y_density=300, x_thumbnail=0, y_thumbnail=0)
        assert render(False, "handle_app0_jfif", 2, 16, jfif) == (
            "App(0x0): JFIF\n"
            "  Version: 1.02\n"
            "  Density: 300x300 dots per inch\n"
            "  Thumbnail: 0x0\n"
        )

    def test_unknown_unit(self):
        jfif = App0Jfif(unit=7, x_density=1, y_density=1)
        assert "  Density: 1x1 Unknown unit: 7\n" in render(False, "handle_app0_jfif", 2, 16, jfif)

    def test_minor_two_digits(self):
        jfif = App0Jfif(major=1, minor=11)
        assert "  Version: 1.11\n" in render(False, "handle_app0_jfif", 2, 16, jfif)


class TestDqt:
    """Tests for quantization table rendering."""

    def test_summary_only(self):
        tables = [Dqt(dest=0, precision=0, values=list(range(64))), Dqt(dest=1, precision=1, values=[1] * 64)]
        assert render(False, "handle_dqt", 0x14, 0x84, tables) == (
            "DQT:\n"
            "  0: Precision 0\n"
            "  1: Precision 1\n"
        )

    def test_single_row(self):
        tables = [Dqt(dest=0, precision=0, values=[1, 2, 3, 4, 5, 6, 7, 8])]
        assert render(True, "handle_dqt", 0x14, 0x43, tables) == (
            "0x14/0x43: DQT:\n"
            "  0: Precision 0\n"
            "      1,   2,   3,   4,   5,   6,   7,   8, \n"
        )

    def test_padding_widths(self):
        tables = [Dqt(dest=2, precision=1, values=[5, 50, 500, 5000])]
        text = render(True, "handle_dqt", 0, 7, tables)
        assert text.splitlines()[2] == "      5,  50, 500, 5000, "

    def test_rows_of_eight(self):
        tables = [Dqt(dest=0, precision=0, values=list(range(64)))]
        lines = render(True, "handle_dqt", 0, 0x43, tables).splitlines()
        assert len(lines) == 2 + 8
        assert lines[2] == "      0,   1,   2,   3,   4,   5,   6,   7, "
        assert lines[9] == "     56,  57,  58,  59,  60,  61,  62,  63, "


class TestDht:
    def test_summary(self):
        tables = [Dht(dest=0, class_=0, code_lengths=[0, 1, 5]), Dht(dest=1, class_=1, code_lengths=[0, 2])]
        assert render(False, "handle_dht", 0, 0x1F, tables) == (
            "DHT:\n"
            "  Table 0: Class 0\n"
            "  Table 1: Class 1\n"
        )

    def test_verbose_code_lengths(self):
        tables = [Dht(dest=0, class_=1, code_lengths=[0, 2, 1, 3])]
        assert render(True, "handle_dht", 0x9E, 0x1F, tables) == (
            "0x9E/0x1F: DHT:\n"
            "  Table 0: Class 1\n"
            "    Code lengths: 0, 2, 1, 3\n"
        )


class TestDac:
    def test_params(self):
        dac = Dac(params=[DacParam(class_=0, dest=1, value=0x10), DacParam(class_=1, dest=0, value=5)])
        assert render(False, "handle_dac", 0, 6, dac) == (
            "DAC:\n"
            "  Class: 0   Dest: 1    Value: 16\n"
            "  Class: 1   Dest: 0    Value: 5\n"
        )


class TestFrame:
    def test_baseline_frame(self):
        frame = Frame(
            sof=0,
            precision=8,
            dimension_y=480,
            dimension_x=640,
            components=[
                FrameComponent(id=1, horizontal_sampling_factor=2, vertical_sampling_factor=2, quantization_table=0),
                FrameComponent(id=2, horizontal_sampling_factor=1, vertical_sampling_factor=1, quantization_table=1),
            ],
        )
        assert render(False, "handle_frame", 0, 0x11, frame) == (
            "Frame: Baseline DCT\n"
            "  Precision: 8\n"
            "  Dimension: 640x480\n"
            "  Component(1): Sampling 2x2 Quantization: 0\n"
            "  Component(2): Sampling 1x1 Quantization: 1\n"
        )


class TestScan:
    def test_scan(self):
        scan = Scan(
            components=[ScanComponent(id=1, dc_table=0, ac_table=0)],
            selection_start=0,
            selection_end=63,
            approximation_low=0,
            approximation_high=0,
            data=b"\x00" * 1234,
        )
        assert render(False, "handle_scan", 0, 8, scan) == (
            "Scan:\n"
            "  Component: 1 DC:0 AC:0\n"
            "  Selection: 0 to 63\n"
            "  Approximation: 0 to 0\n"
            "  Data: 1234 bytes\n"
        )

    def test_scan_ac_column_reads_ac_table(self):
        """The AC column shows the component's AC table, not its DC table."""
        scan = Scan(components=[ScanComponent(id=2, dc_table=1, ac_table=3)])
        assert "  Component: 2 DC:1 AC:3\n" in render(False, "handle_scan", 0, 8, scan)


class TestSmallSegments:
    def test_dri(self):
        assert render(False, "handle_dri", 0, 4, 320) == "DRI: 320\n"

    def test_rst(self):
        assert render(False, "handle_rst", 0, 0, Rst(nr=5, data=b"\x01" * 17)) == "RST(5): Data: 17 bytes\n"

    def test_unknown_scenario(self):
        assert render(False, "handle_unknown", 0, 9, 0xE5, b"\x00" * 7) == "Unknown(0xE5): Length 7\n"


class TestComment:
    def test_utf8_comment(self):
        assert render(False, "handle_comment", 0, 14, "Créé by me".encode("utf-8")) == "Comment: Créé by me\n"

    def test_empty_comment(self):
        assert render(False, "handle_comment", 0, 2, b"") == "Comment: \n"

    def test_bad_string(self):
        data = b"abc\xff\xfe"
        assert render(False, "handle_comment", 0, 7, data) == "Comment: BAD STRING WITH LENGTH 5\n"

    def test_bad_string_verbose(self):
        assert render(True, "handle_comment", 0x20, 5, b"\xc3") == "0x20/0x5: Comment: BAD STRING WITH LENGTH 1\n"


class _ClosedSink:
    def write(self, text):
        raise ValueError("I/O operation on closed file.")


class _FullDisk:
    def write(self, text):
        raise OSError(28, "No space left on device")


class TestOutputErrors:
    """Write failures propagate out of every operation."""

    @pytest.mark.parametrize("method, args", ALL_SEGMENTS)
    def test_closed_sink(self, method, args):
        fmt = TextFormat(verbose=False, out=_ClosedSink())
        with pytest.raises(OutputError):
            getattr(fmt, method)(0, 0, *args)

    def test_os_error_is_chained(self):
        fmt = TextFormat(verbose=True, out=_FullDisk())
        with pytest.raises(OutputError) as excinfo:
            fmt.handle_soi(0, 0)
        assert isinstance(excinfo.value.__cause__, OSError)
        assert isinstance(excinfo.value, IOError)

    def test_closed_stringio(self):
        out = io.StringIO()
        out.close()
        with pytest.raises(OutputError):
            TextFormat(out=out).handle_eoi(0, 0)

    def test_default_sink_is_stdout(self, capsys):
        TextFormat().handle_soi(0, 0)
        assert capsys.readouterr().out == "SOI\n"
