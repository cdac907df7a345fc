"""
main.py
Entry point for the voice pitch monitor.
"""
import argparse
import logging
import sys

from Core.audio_engine import AudioEngine, DEFAULT_SAMPLE_RATE, DEFAULT_BLOCK_SIZE
from Core.session import SessionLogger


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Real-time voice pitch monitor.")
    parser.add_argument("--rate", type=int, default=DEFAULT_SAMPLE_RATE,
                        help="capture sample rate in Hz")
    parser.add_argument("--block-size", type=int, default=DEFAULT_BLOCK_SIZE,
                        help="samples analyzed per frame")
    parser.add_argument("--fps", type=int, default=60,
                        help="maximum analysis frames per second")
    parser.add_argument("--log-file", default="sessions.jsonl",
                        help="JSON-lines file receiving finished sessions")
    parser.add_argument("--record-dir", default="recordings",
                        help="directory for recorded WAV files")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)
    if args.rate <= 0 or args.block_size <= 0 or args.fps <= 0:
        parser.error("--rate, --block-size and --fps must be positive")
    return args


def main(argv=None):
    """Main function controlling the application flow."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        import tkinter as tk
    except ImportError:
        print("Error: Tkinter is missing.")
        print("Please install it using your system package manager:")
        print("  Ubuntu/Debian: sudo apt install python3-tk")
        print("  Fedora:        sudo dnf install python3-tkinter")
        sys.exit(1)
    from gui.main_window import PitchApp

    engine = AudioEngine(rate=args.rate, block_size=args.block_size)
    root = tk.Tk()
    PitchApp(root, engine, SessionLogger(args.log_file),
             record_dir=args.record_dir, interval_ms=max(1, 1000 // args.fps))
    root.mainloop()


if __name__ == "__main__":
    main()
