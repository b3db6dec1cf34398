"""LearnQuest - progress tracking and LMS persistence for a packaged course."""

__version__ = "0.1.0"
