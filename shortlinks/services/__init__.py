from shortlinks.services.recorder import VisitRecorder
from shortlinks.services.resolution import ResolutionService


__all__ = [
    'VisitRecorder',
    'ResolutionService',
]
