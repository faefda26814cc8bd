"""binview: interactive terminal hex-dump viewer with differential rendering."""

# Main loop
from binview.app import Viewer

# Configuration
from binview.config import Config, Theme, load_config

# Errors
from binview.errors import (
    BinviewError,
    EmptyInputError,
    InputReadError,
    TerminalError,
)

# Keyboard input handling
from binview.keys import Key, parse_key

# Diff cache
from binview.line_cache import LineCache

# Navigation state machine
from binview.navigation import KEY_ACTIONS, Action, Mode, Navigator, Outcome

# Row rendering
from binview.render import render_line, utf8_sequence_length

# Record sources
from binview.source import (
    RECORD_SIZE,
    MemorySource,
    RecordSource,
    load_records,
    open_inputs,
)

# Input buffering
from binview.stdin_buffer import StdinBuffer

# Terminal interface and implementations
from binview.terminal import ProcessTerminal, Terminal

# Utilities
from binview.utils import truncate_to_width, visible_width

__all__ = [
    # Main loop
    "Viewer",
    # Configuration
    "Config",
    "Theme",
    "load_config",
    # Errors
    "BinviewError",
    "EmptyInputError",
    "InputReadError",
    "TerminalError",
    # Keys
    "Key",
    "parse_key",
    # Diff cache
    "LineCache",
    # Navigation
    "KEY_ACTIONS",
    "Action",
    "Mode",
    "Navigator",
    "Outcome",
    # Rendering
    "render_line",
    "utf8_sequence_length",
    # Record sources
    "RECORD_SIZE",
    "MemorySource",
    "RecordSource",
    "load_records",
    "open_inputs",
    # Stdin buffer
    "StdinBuffer",
    # Terminal
    "ProcessTerminal",
    "Terminal",
    # Utilities
    "truncate_to_width",
    "visible_width",
]
