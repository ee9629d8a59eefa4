"""Command line interface for inspecting and repacketizing Opus packets."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Iterable, List, Sequence

from rich.console import Console

from .exceptions import OpusKitError
from .native.loader import version
from .packet import Repacketizer, get_bandwidth, get_nb_channels, get_samples_per_frame, parse
from .utils.logging import configure_logging

console = Console()

INSPECT_SAMPLE_RATE = 48000


def _read_bytes(path: str | None) -> bytes:
    if not path or path == "-":
        return sys.stdin.buffer.read()
    return Path(path).read_bytes()


def _write_bytes(path: str | None, data: bytes) -> None:
    if not path or path == "-":
        sys.stdout.buffer.write(data)
        return
    Path(path).write_bytes(data)


def _handle_version(argv: Sequence[str]) -> int:
    parser = argparse.ArgumentParser(prog="opuskit version", description="Print the libopus version string.")
    parser.parse_args(list(argv))
    try:
        console.print(version())
    except OpusKitError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        return 1
    return 0


def _handle_inspect(argv: Sequence[str]) -> int:
    parser = argparse.ArgumentParser(prog="opuskit inspect", description="Describe the framing of an Opus packet.")
    parser.add_argument("packet", help="Packet file (use '-' for stdin)")
    args = parser.parse_args(list(argv))

    try:
        data = _read_bytes(args.packet)
        packet = parse(data)
        bandwidth = get_bandwidth(data)
        channels = get_nb_channels(data)
        samples = get_samples_per_frame(data, INSPECT_SAMPLE_RATE)
    except (OSError, OpusKitError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        return 1

    sizes = ", ".join(str(end - start) for start, end in packet.frame_ranges)
    console.print(f"[cyan]size:[/cyan] {len(data)} bytes")
    console.print(f"[cyan]toc:[/cyan] 0x{packet.toc:02x} (config {packet.toc >> 3}, code {packet.toc & 0x3})")
    console.print(f"[cyan]bandwidth:[/cyan] {bandwidth.name}")
    console.print(f"[cyan]channels:[/cyan] {channels.name}")
    console.print(f"[cyan]frames:[/cyan] {packet.nb_frames} x {samples} samples at {INSPECT_SAMPLE_RATE} Hz")
    console.print(f"[cyan]frame sizes:[/cyan] {sizes}")
    console.print(f"[cyan]payload offset:[/cyan] {packet.payload_offset}")
    return 0


def _handle_combine(argv: Sequence[str]) -> int:
    parser = argparse.ArgumentParser(
        prog="opuskit combine",
        description="Merge the frames of several packets into a single packet.",
    )
    parser.add_argument("inputs", nargs="+", help="Packet files, in stream order")
    parser.add_argument("-o", "--output", dest="output_path", default="-", help="Merged packet (default: stdout)")
    args = parser.parse_args(list(argv))

    try:
        packets = [_read_bytes(path) for path in args.inputs]
        with Repacketizer() as repacketizer, repacketizer.begin() as session:
            for packet in packets:
                session.cat(packet)
            merged = session.to_bytes()
    except (OSError, OpusKitError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        return 1

    _write_bytes(args.output_path, merged)
    return 0


def _handle_split(argv: Sequence[str]) -> int:
    parser = argparse.ArgumentParser(
        prog="opuskit split",
        description="Write every frame of a packet as a packet of its own.",
    )
    parser.add_argument("input_path", help="Packet file (use '-' for stdin)")
    parser.add_argument("-o", "--output-dir", dest="output_dir", required=True, help="Directory for the frame packets")
    args = parser.parse_args(list(argv))

    try:
        data = _read_bytes(args.input_path)
        with Repacketizer() as repacketizer:
            frames = repacketizer.split(data)
    except (OSError, OpusKitError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        return 1

    stem = "stdin" if args.input_path == "-" else Path(args.input_path).stem
    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for index, frame in enumerate(frames):
        target = output_dir / f"{stem}-{index:03d}.opus"
        target.write_bytes(frame)
        written.append(target)
    console.print(f"Wrote {len(written)} packets to {output_dir}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="opuskit",
        description="Inspect, merge and split Opus packets.",
    )
    subparsers = parser.add_subparsers(dest="command")
    for command in ["version", "inspect", "combine", "split"]:
        subparsers.add_parser(command)
    return parser


def main(argv: Iterable[str] | None = None) -> int:
    args = list(argv) if argv is not None else sys.argv[1:]
    if not args:
        build_parser().print_help()
        return 0

    configure_logging()
    command, rest = args[0], args[1:]

    if command == "version":
        return _handle_version(rest)
    if command == "inspect":
        return _handle_inspect(rest)
    if command == "combine":
        return _handle_combine(rest)
    if command == "split":
        return _handle_split(rest)

    console.print(f"[red]Error:[/red] unknown command '{command}'")
    build_parser().print_help()
    return 1


if __name__ == "__main__":  # pragma: no cover - module entry point
    sys.exit(main())
