from .area import StagingArea
from .naming import audio_name, frame_name, frame_pattern, directory_name

__all__ = ["StagingArea", "audio_name", "directory_name", "frame_name", "frame_pattern"]
