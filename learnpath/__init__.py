"""learnpath - progress tracking and lesson sessions for an adaptive learning platform."""

__version__ = "0.1.0"
