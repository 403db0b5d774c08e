"""sheetstand — music stand layout and playback cursor for Virtual Piano sheets."""

__version__ = "0.1.0"
