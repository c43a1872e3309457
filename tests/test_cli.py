"""Tests for the command-line entry point."""

from PIL import Image

from buddhascope.cli import PROFILES, _ProgressBar, build_parser, main


def _args(tmp_path, name="out.ppm", *extra):
    return [
        "-p", "low",
        "--width", "32",
        "--height", "18",
        "-n", "5000",
        "--seed", "3",
        "-o", str(tmp_path / name),
        *extra,
    ]


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.profile == "medium"
        assert args.radius == 2.0
        assert args.workers == 1
        assert not args.no_circles

    def test_profiles(self):
        assert PROFILES["medium"] == {"width": 1920, "height": 1080, "samples": 10_000_000}
        assert set(PROFILES) == {"low", "medium", "high"}


class TestMain:
    def test_writes_ppm(self, tmp_path, capsys):
        assert main(_args(tmp_path)) == 0

        data = (tmp_path / "out.ppm").read_bytes()
        header_end = data.index(b"\n255\n") + len(b"\n255\n")
        assert data.startswith(b"P6\n# ")
        assert b"\n32 18\n" in data[:header_end]
        assert len(data) - header_end == 32 * 18 * 3

        out = capsys.readouterr().out
        assert "largest = " in out

    def test_writes_png(self, tmp_path):
        assert main(_args(tmp_path, "out.png", "--no-circles")) == 0
        with Image.open(tmp_path / "out.png") as img:
            assert img.size == (32, 18)

    def test_reproducible_with_seed(self, tmp_path):
        assert main(_args(tmp_path, "a.ppm")) == 0
        assert main(_args(tmp_path, "b.ppm")) == 0
        assert (tmp_path / "a.ppm").read_bytes() == (tmp_path / "b.ppm").read_bytes()

    def test_workers_option(self, tmp_path):
        assert main(_args(tmp_path, "w.ppm", "--workers", "2")) == 0
        assert (tmp_path / "w.ppm").exists()

    def test_write_failure_exit_code(self, tmp_path, capsys):
        assert main(_args(tmp_path, "missing/out.ppm")) == 1
        assert "Error:" in capsys.readouterr().err

    def test_too_small_image(self, tmp_path, capsys):
        assert main(["--width", "1", "--height", "1", "-o", str(tmp_path / "x.ppm")]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_bad_radius(self, tmp_path, capsys):
        assert main(_args(tmp_path, "r.ppm", "--radius", "-1")) == 1
        assert "Error:" in capsys.readouterr().err


class TestProgressBar:
    def test_non_tty_prints_percentage(self, capsys):
        _ProgressBar()(50, 100)
        out = capsys.readouterr().out
        assert "50.0%" in out
        assert "sample 50/100" in out

    def test_non_tty_throttled_to_twentieths(self, capsys):
        bar = _ProgressBar()
        for current in range(1, 1001):
            bar(current, 1000)
        lines = capsys.readouterr().out.splitlines()
        # the first call, then 5%, 10%, ... 100%
        assert len(lines) == 21
        assert lines[0].startswith("  0.1%")
        assert lines[-1].endswith("sample 1000/1000")

    def test_uneven_worker_counts_do_not_repeat(self, capsys):
        bar = _ProgressBar()
        for current in (3, 4, 1337, 3334, 3335, 6668, 10000, 10000):
            bar(current, 10000)
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 5
        assert len(set(lines)) == 5
