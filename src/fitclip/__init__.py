"""fitclip - fit videos into platform size and duration limits with ffmpeg."""

__version__ = "0.1.0"
