from .job import ExportJob
from .transcoder import Transcoder
from .orchestrator import ExportOrchestrator

__all__ = ["ExportJob", "ExportOrchestrator", "Transcoder"]
