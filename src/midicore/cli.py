from __future__ import annotations

import heapq
import json
import logging
import sys

import mido

from .convert import convert_track
from .event import MidiEvent
from .ordering import InsertMode, insert_event, to_absolute

logger = logging.getLogger(__name__)

USAGE = "usage: midicore-dump FILE [--track N] [--jsonl] [--no-merge] [--verbose]"


def _parse_int(argv: list[str], name: str, default: int | None) -> int | None:
    for i, arg in enumerate(argv):
        if arg.startswith(f"{name}="):
            value = arg.split("=", 1)[1].strip()
            try:
                return int(value)
            except ValueError:
                return default
        if arg == name and i + 1 < len(argv):
            try:
                return int(argv[i + 1])
            except ValueError:
                return default
    return default


def _has_flag(argv: list[str], name: str) -> bool:
    return name in argv


def _has_option(argv: list[str], name: str) -> bool:
    return any(arg == name or arg.startswith(f"{name}=") for arg in argv)


def _positional(argv: list[str]) -> list[str]:
    result = []
    skip = False
    for arg in argv:
        if skip:
            skip = False
            continue
        if arg == "--track":
            skip = True
            continue
        if arg.startswith("--"):
            continue
        result.append(arg)
    return result


def load_tracks(path: str, texts: list[str]) -> tuple[mido.MidiFile, list[list[MidiEvent]]]:
    midi_file = mido.MidiFile(path)
    tracks = [to_absolute(list(convert_track(track, texts))) for track in midi_file.tracks]
    return midi_file, tracks


def merge_tracks(tracks: list[list[MidiEvent]]) -> list[MidiEvent]:
    merged: list[MidiEvent] = []
    # time order keeps every insert near the tail; ties go to the lower track
    for event in heapq.merge(*tracks, key=lambda e: e.abs_time):
        # one end of track for the merged sequence
        if event.protocol is not None and event.protocol.is_end_of_track():
            continue
        insert_event(merged, event, InsertMode.INSERT)
    if merged:
        end = MidiEvent.at(max(e.abs_time for e in merged))
        end.protocol.set_end_of_track()
        insert_event(merged, end)
    return merged


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    verbose = _has_flag(argv, "--verbose")
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    paths = _positional(argv)
    only_track = _parse_int(argv, "--track", None)
    if len(paths) != 1 or (only_track is None and _has_option(argv, "--track")):
        print(USAGE, file=sys.stderr)
        return 2
    path = paths[0]
    jsonl = _has_flag(argv, "--jsonl")
    no_merge = _has_flag(argv, "--no-merge")

    texts: list[str] = []
    try:
        midi_file, tracks = load_tracks(path, texts)
    except (OSError, EOFError, ValueError) as e:
        print(f"cannot read {path}: {e}", file=sys.stderr)
        return 1
    logger.debug("loaded %d tracks from %s", len(tracks), path)

    if only_track is not None:
        if not 0 <= only_track < len(tracks):
            print(f"no track {only_track} in {path} ({len(tracks)} tracks)", file=sys.stderr)
            return 1
        tracks = [tracks[only_track]]

    if not jsonl:
        print(f"format={midi_file.type} tracks={len(midi_file.tracks)} division={midi_file.ticks_per_beat}")

    sections = [(i, t) for i, t in enumerate(tracks)] if no_merge else [(None, merge_tracks(tracks))]
    for track_no, events in sections:
        if not jsonl and track_no is not None:
            print(f"-- track {track_no}")
        for event in events:
            protocol = event.protocol
            text = event.to_text()
            if protocol is not None and protocol.is_text_event() and protocol.meta_value < len(texts):
                text = f"{text} {texts[protocol.meta_value]!r}"
            if jsonl:
                record = event.to_record()
                record["text"] = text
                if track_no is not None:
                    record["track"] = track_no
                print(json.dumps(record, ensure_ascii=False))
            else:
                print(f"{event.abs_time:>8} {text}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
